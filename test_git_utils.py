import os
import subprocess
import tempfile
import unittest
from unittest.mock import patch

import git_utils
from config import GlobalConfig
from models import CommitHeader, FileChange


class TestParseHistoryStream(unittest.TestCase):

    def test_header_then_numstat(self):
        records = list(
            git_utils.parse_history_stream("a@x.com,2024-01-10,h1\n3\t1\tfile.go\n")
        )
        self.assertEqual(
            records,
            [
                CommitHeader(email="a@x.com", date="2024-01-10", commit_hash="h1"),
                FileChange(added=3, removed=1, path="file.go"),
            ],
        )

    def test_stat_lines_before_first_header_are_ignored(self):
        records = list(
            git_utils.parse_history_stream("5\t5\told.py\na@x.com,2024-01-10,h1\n")
        )
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], CommitHeader)

    def test_binary_sentinel_is_skipped(self):
        stream = "a@x.com,2024-01-10,h1\n-\t-\tbinary.png\n2\t0\tREADME.md\n"
        records = list(git_utils.parse_history_stream(stream))
        self.assertEqual(records[1:], [FileChange(added=2, removed=0, path="README.md")])

    def test_non_numeric_fields_count_as_zero(self):
        stream = "a@x.com,2024-01-10,h1\nabc\t4\tf.txt\n"
        records = list(git_utils.parse_history_stream(stream))
        self.assertEqual(records[1], FileChange(added=0, removed=4, path="f.txt"))

    def test_non_ascii_digits_count_as_zero(self):
        stream = "a@x.com,2024-01-10,h1\n\u00b2\t1\tf.txt\n3\t\u0663\tg.txt\n"
        records = list(git_utils.parse_history_stream(stream))
        self.assertEqual(
            records[1:],
            [
                FileChange(added=0, removed=1, path="f.txt"),
                FileChange(added=3, removed=0, path="g.txt"),
            ],
        )

    def test_signed_and_padded_numbers_count_as_zero(self):
        stream = "a@x.com,2024-01-10,h1\n+3\t 2\tf.txt\n"
        records = list(git_utils.parse_history_stream(stream))
        self.assertEqual(records[1], FileChange(added=0, removed=0, path="f.txt"))

    def test_only_first_three_header_fields_are_used(self):
        stream = "a@x.com,2024-01-10,h1,extra,fields\n"
        header = list(git_utils.parse_history_stream(stream))[0]
        self.assertEqual(
            (header.email, header.date, header.commit_hash),
            ("a@x.com", "2024-01-10", "h1"),
        )

    def test_short_header_and_malformed_stat_lines_are_ignored(self):
        stream = "\n".join(
            [
                "a@x.com,2024-01-10",  # 只有两个字段
                "1\t2\tf.txt",  # 还没有有效提交头
                "b@x.com,2024-01-11,h2",
                "1\t2",  # 字段数不对
                "",
                "random text",
            ]
        )
        records = list(git_utils.parse_history_stream(stream))
        self.assertEqual(
            records, [CommitHeader(email="b@x.com", date="2024-01-11", commit_hash="h2")]
        )


class TestTimelineBucket(unittest.TestCase):

    def test_week_uses_iso_week(self):
        self.assertEqual(git_utils.timeline_bucket("2024-01-10", "week"), "2024-02")

    def test_week_uses_iso_week_year(self):
        # 2021-01-01 属于 2020 年的第 53 周
        self.assertEqual(git_utils.timeline_bucket("2021-01-01", "week"), "2020-53")
        # 2024-12-30 属于 2025 年的第 1 周
        self.assertEqual(git_utils.timeline_bucket("2024-12-30", "week"), "2025-01")

    def test_month(self):
        self.assertEqual(git_utils.timeline_bucket("2024-01-10", "month"), "2024-JAN")
        self.assertEqual(git_utils.timeline_bucket("2023-09-30", "month"), "2023-SEP")

    def test_unparsable_date(self):
        self.assertIsNone(git_utils.timeline_bucket("yesterday", "week"))
        self.assertIsNone(git_utils.timeline_bucket("", "month"))

    def test_date_must_be_zero_padded(self):
        self.assertIsNone(git_utils.timeline_bucket("2024-1-5", "month"))
        self.assertIsNone(git_utils.timeline_bucket("2024-01-5", "week"))
        self.assertIsNone(git_utils.timeline_bucket("2024-01-10 ", "week"))


class TestGitCommands(unittest.TestCase):

    def setUp(self):
        self.config = GlobalConfig()

    @patch("git_utils.run_git_command")
    def test_list_branches_trims_and_drops_blank_and_head(self, mock_run):
        mock_run.return_value = " main\n\nfeature/login \n(HEAD detached at 1a2b3c)\nHEAD\n"
        self.assertEqual(
            git_utils.list_branches("/repo", self.config), ["main", "feature/login"]
        )
        mock_run.assert_called_once()
        self.assertEqual(mock_run.call_args[0][0], self.config.GIT_BRANCH_ARGS)

    @patch("git_utils.run_git_command", return_value=None)
    def test_list_branches_failure_is_fatal(self, _):
        with self.assertRaises(git_utils.GitCommandError):
            git_utils.list_branches("/repo", self.config)

    @patch("git_utils.run_git_command")
    def test_merge_base(self, mock_run):
        mock_run.return_value = "abc123\n"
        self.assertEqual(
            git_utils.get_merge_base("/repo", "main", "dev", self.config), "abc123"
        )
        self.assertEqual(mock_run.call_args[0][0], ["merge-base", "main", "dev"])

        mock_run.return_value = None
        self.assertIsNone(git_utils.get_merge_base("/repo", "main", "dev", self.config))

        mock_run.return_value = "  \n"
        self.assertIsNone(git_utils.get_merge_base("/repo", "main", "dev", self.config))

    @patch("git_utils.run_git_command", return_value="")
    def test_history_log_arguments(self, mock_run):
        git_utils.get_history_log("/repo", "abc..dev", self.config, "*.go")
        args = mock_run.call_args[0][0]
        self.assertEqual(args[:4], self.config.GIT_LOG_ARGS)
        self.assertEqual(args[4:], ["abc..dev", "--", "*.go"])

        git_utils.get_history_log("/repo", "dev", self.config)
        self.assertEqual(mock_run.call_args[0][0][4:], ["dev"])

    @patch("git_utils.subprocess.run")
    def test_run_git_command(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="out\n", stderr=""
        )
        self.assertEqual(git_utils.run_git_command(["status"], "/repo"), "out\n")
        self.assertEqual(mock_run.call_args[0][0], ["git", "status"])
        self.assertEqual(mock_run.call_args[1]["cwd"], "/repo")

        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=128, stdout="", stderr="fatal: bad revision"
        )
        self.assertIsNone(git_utils.run_git_command(["log"], "/repo"))

        mock_run.side_effect = FileNotFoundError("git")
        self.assertIsNone(git_utils.run_git_command(["log"], "/repo"))

    @patch("git_utils.subprocess.run")
    @patch("git_utils.run_git_command")
    def test_checkout_remote_branches(self, mock_git, mock_run):
        mock_git.return_value = (
            "  origin/HEAD -> origin/main\n  origin/main\n  origin/dev\n  upstream/x\n"
        )
        mock_run.side_effect = [
            subprocess.CompletedProcess(
                args=[], returncode=128, stdout="",
                stderr="fatal: a branch named 'main' already exists",
            ),
            subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr=""),
        ]
        git_utils.checkout_remote_branches("/repo", self.config)
        created = [c[0][0][3] for c in mock_run.call_args_list]
        self.assertEqual(created, ["main", "dev"])

    @patch("git_utils.subprocess.run")
    @patch("git_utils.run_git_command", return_value="  origin/dev\n")
    def test_checkout_remote_branches_failure(self, _, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="fatal: something else"
        )
        with self.assertRaises(git_utils.GitCommandError):
            git_utils.checkout_remote_branches("/repo", self.config)


class TestCloneRepository(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.dest = os.path.join(self._tmp.name, ".repositories")

    @patch("git_utils.subprocess.run")
    def test_existing_clone_is_reused(self, mock_run):
        existing = os.path.join(self.dest, "app.git")
        os.makedirs(existing)
        path = git_utils.clone_repository("https://example.com/org/app.git", self.dest)
        self.assertEqual(path, existing)
        mock_run.assert_not_called()

    @patch("git_utils.subprocess.run")
    def test_clone_into_named_directory(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="", stderr=""
        )
        path = git_utils.clone_repository("https://example.com/org/app/", self.dest)
        self.assertEqual(path, os.path.join(self.dest, "app"))
        self.assertEqual(
            mock_run.call_args[0][0],
            ["git", "clone", "https://example.com/org/app/", path],
        )

    @patch("git_utils.subprocess.run")
    def test_failed_clone_raises(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=128, stdout="", stderr="fatal: repository not found"
        )
        with self.assertRaises(git_utils.GitCommandError) as cm:
            git_utils.clone_repository("https://example.com/org/missing.git", self.dest)
        self.assertIn("repository not found", str(cm.exception))

    @patch("git_utils.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_clone_without_git_binary_raises(self, _):
        with self.assertRaises(git_utils.GitCommandError):
            git_utils.clone_repository("https://example.com/org/app.git", self.dest)


if __name__ == "__main__":
    unittest.main()
