"""Tests for the dismiss_stale_reviews command line script."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import dismiss_stale_reviews
from stale_pr.config.settings import Settings
from stale_pr.errors import ProviderError
from stale_pr.staleness.domain.value_objects import StalenessOutcome

MANUAL_ARGS = [
    "--repository",
    "octocat/myrepo",
    "--pull-number",
    "42",
    "--base",
    "93a783ae53a771682a2641c4a1f42df78feff95e",
    "--before",
    "790fe8dfc858c01f1620ca3a548e87d83743c968",
    "--after",
    "c0de998dbee3354e636211dbad25515fffc57a70",
]


def _main(argv: list[str], settings: Settings) -> int:
    with patch.object(dismiss_stale_reviews, "load_settings", return_value=settings):
        with pytest.raises(SystemExit) as exc_info:
            dismiss_stale_reviews.main(argv)
    return exc_info.value.code


class TestMain:
    """Tests for main."""

    def test_non_synchronize_action_is_a_successful_skip(
        self, payload: dict, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Other pull request actions should exit 0 without calling GitHub."""
        payload["action"] = "opened"
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(payload), encoding="utf-8")
        settings = Settings(
            github_token="myToken", event_name="pull_request", event_path=event_path
        )

        with patch.object(dismiss_stale_reviews, "run") as mock_run:
            code = _main([], settings)

        assert code == 0
        mock_run.assert_not_called()
        assert "Skipping for opened action" in capsys.readouterr().out

    def test_missing_event_is_a_configuration_error(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _main([], Settings(github_token="myToken"))

        assert code == 1
        assert "No event to process" in capsys.readouterr().err

    def test_incomplete_manual_options(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _main(["--repository", "octocat/myrepo"], Settings(github_token="myToken"))

        assert code == 1
        assert "--pull-number" in capsys.readouterr().err

    def test_missing_token(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Running without a token should fail with a hint."""
        code = _main(MANUAL_ARGS, Settings())

        assert code == 1
        err = capsys.readouterr().err
        assert "token is required" in err
        assert "Hint" in err

    def test_not_stale(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.object(
            dismiss_stale_reviews, "run", return_value=StalenessOutcome(stale=False)
        ):
            code = _main(MANUAL_ARGS, Settings(github_token="myToken"))

        assert code == 0
        assert "Diffs are identical" in capsys.readouterr().out

    def test_stale(self, capsys: pytest.CaptureFixture[str]) -> None:
        outcome = StalenessOutcome(
            stale=True,
            artifact="--- before-patch\n+++ after-patch",
            dismissed_review_ids=(333,),
            comment_posted=True,
        )
        with patch.object(dismiss_stale_reviews, "run", return_value=outcome) as mock_run:
            code = _main(MANUAL_ARGS, Settings(github_token="myToken"))

        assert code == 0
        out = capsys.readouterr().out
        assert "Dismissed 1 stale approval(s)" in out
        assert "Posted diff of diffs comment" in out
        event = mock_run.call_args[0][2]
        assert event.pull_number == 42
        assert str(event.repository) == "octocat/myrepo"

    def test_provider_error_fails(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.object(
            dismiss_stale_reviews, "run", side_effect=ProviderError("Bad credentials")
        ):
            code = _main(MANUAL_ARGS, Settings(github_token="myToken"))

        assert code == 1
        assert "Bad credentials" in capsys.readouterr().err

    def test_dry_run_does_not_send_to_slack(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A dry run should report the Slack notice instead of sending it."""
        outcome = StalenessOutcome(stale=True, artifact="+- diff")
        settings = Settings(github_token="myToken", slack_token="xoxb")
        with (
            patch.object(dismiss_stale_reviews, "run", return_value=outcome),
            patch.object(dismiss_stale_reviews, "SlackNotificationRepositoryImpl") as slack_cls,
        ):
            code = _main([*MANUAL_ARGS, "--dry-run", "--slack-channel", "reviews"], settings)

        assert code == 0
        slack_cls.assert_not_called()
        slack_cls.return_value.send_stale_notice.assert_not_called()
        assert "Dry run: would send stale notice to #reviews" in capsys.readouterr().out

    def test_sends_to_slack(self) -> None:
        """Outside a dry run the stale notice should be sent."""
        outcome = StalenessOutcome(stale=True, artifact="+- diff")
        settings = Settings(github_token="myToken", slack_token="xoxb")
        with (
            patch.object(dismiss_stale_reviews, "run", return_value=outcome),
            patch.object(dismiss_stale_reviews, "SlackNotificationRepositoryImpl") as slack_cls,
        ):
            slack_cls.return_value.send_stale_notice.return_value = True
            code = _main([*MANUAL_ARGS, "--slack-channel", "reviews"], settings)

        assert code == 0
        slack_cls.assert_called_once_with(token="xoxb")
        slack_cls.return_value.send_stale_notice.assert_called_once()

    def test_slack_requires_token(self, capsys: pytest.CaptureFixture[str]) -> None:
        outcome = StalenessOutcome(stale=True, artifact="+- diff")
        with patch.object(dismiss_stale_reviews, "run", return_value=outcome):
            code = _main(
                [*MANUAL_ARGS, "--slack-channel", "reviews"], Settings(github_token="myToken")
            )

        assert code == 1
        assert "SLACK_TOKEN" in capsys.readouterr().err


class TestRun:
    """Tests for run wiring."""

    def test_policy_follows_flags(self) -> None:
        """--no-comment and --dry-run should shape the dismissal policy."""
        args = dismiss_stale_reviews.build_parser().parse_args(
            [*MANUAL_ARGS, "--no-comment", "--dry-run", "--max-artifact-size", "500"]
        )
        settings = Settings(github_token="myToken")
        event = dismiss_stale_reviews.resolve_event(args, settings)

        with patch.object(dismiss_stale_reviews, "StalenessService") as service_cls:
            service_cls.return_value.decide.return_value = StalenessOutcome(stale=False)
            dismiss_stale_reviews.run(args, settings, event)

        policy = service_cls.call_args.kwargs["policy"]
        assert not policy.post_comment
        assert policy.dry_run
        assert policy.max_artifact_size == 500

    def test_local_repo_missing_revision(self, tmp_path: Path) -> None:
        """Unknown local revisions should be reported before any diff is taken."""
        args = dismiss_stale_reviews.build_parser().parse_args(
            [*MANUAL_ARGS, "--local-repo", str(tmp_path)]
        )
        settings = Settings(github_token="myToken")
        event = dismiss_stale_reviews.resolve_event(args, settings)

        with patch("subprocess.run", return_value=MagicMock(returncode=1)):
            with pytest.raises(ValueError, match="Base commit .* does not exist"):
                dismiss_stale_reviews.run(args, settings, event)
