"""Tests for milestone progress aggregation."""

from pathos.milestones.progress import compute_progress, progress_count


class TestProgressCount:
    def test_empty_is_zero_percent(self):
        count = progress_count(0, 0)
        assert (count.completed, count.total, count.percent) == (0, 0, 0)

    def test_rounds_percent(self):
        assert progress_count(1, 3).percent == 33
        assert progress_count(2, 3).percent == 67

    def test_all_done(self):
        assert progress_count(4, 4).percent == 100


class TestComputeProgress:
    def test_counts_completed_tasks_and_children(self):
        tasks = [{"completed": 1}, {"completed": 0}, {"completed": True}]
        children = [{"status": "completed"}, {"status": "active"}]
        progress = compute_progress(tasks, children)
        assert progress.tasks.completed == 2
        assert progress.tasks.total == 3
        assert progress.children.completed == 1
        assert progress.children.total == 2
        assert progress.children.percent == 50

    def test_no_tasks_no_children(self):
        progress = compute_progress([], [])
        assert progress.tasks.percent == 0
        assert progress.children.percent == 0

    def test_skipped_child_is_not_completed(self):
        progress = compute_progress([], [{"status": "skipped"}])
        assert progress.children.completed == 0
        assert progress.children.total == 1
