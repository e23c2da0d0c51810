"""Basic smoke tests to verify project setup."""

from groot import __version__


def test_version() -> None:
    """Test that version is correctly defined."""
    assert __version__ == "0.1.0"


def test_import_storage() -> None:
    """Test that storage module can be imported."""
    from groot import storage  # noqa: F401


def test_import_diff() -> None:
    """Test that diff module can be imported."""
    from groot import diff  # noqa: F401


def test_import_cli() -> None:
    """Test that cli module can be imported."""
    from groot.cli import main  # noqa: F401


def test_repo_fixture(repo) -> None:
    """Test that the repo fixture creates the .groot layout."""
    assert (repo.root / ".groot" / "objects").is_dir()
    assert (repo.root / ".groot" / "HEAD").exists()
    assert (repo.root / ".groot" / "index").exists()
