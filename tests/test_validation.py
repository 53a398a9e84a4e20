"""
Tests for the background git environment check
"""
from gitrail.models.validation import EnvironmentValidator, ValidationResult, parse_git_version


class TestParseVersion:
    def test_plain_version(self):
        assert parse_git_version('git version 2.39.2\n') == ('2.39.2', (2, 39))

    def test_vendor_suffix(self):
        assert parse_git_version('git version 2.37.1 (Apple Git-137.1)') == ('2.37.1', (2, 37))

    def test_garbage(self):
        assert parse_git_version('') == (None, None)
        assert parse_git_version('git version unknown') == ('unknown', None)


class TestValidationResult:
    def test_clean_result(self):
        result = ValidationResult()
        result.git_version = '2.40.0'
        result.version_ok = True
        assert not result.has_issues()
        assert result.summary() == ''

    def test_old_version_and_failures(self):
        result = ValidationResult()
        result.git_version = '2.17.1'
        result.failed_commands.append('git branch --list')
        assert result.has_issues()
        summary = result.summary()
        assert '2.17.1' in summary
        assert 'git branch --list' in summary


class TestEnvironmentValidator:
    def test_poll_before_start(self):
        assert EnvironmentValidator().poll() is None

    def test_result_delivered_once(self, monkeypatch):
        expected = ValidationResult()
        validator = EnvironmentValidator()
        monkeypatch.setattr(validator, 'validate', lambda: expected)
        validator.start()
        validator.join(5)
        assert validator.poll() is expected
        assert validator.poll() is None

    def test_missing_git_reports_without_raising(self, tmp_path):
        validator = EnvironmentValidator(str(tmp_path), git=str(tmp_path / 'no-such-git'))
        result = validator.validate()
        assert result.has_issues()
        assert "Could not execute git command" in result.warnings
        assert 'git status --porcelain' in result.failed_commands
