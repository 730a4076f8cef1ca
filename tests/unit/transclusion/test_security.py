"""Tests for sandbox path validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from transclusion.core.transclusion.security import (
    SecurityError,
    ensure_within,
    is_within,
    validate_reference,
)


class TestValidateReference:
    @pytest.mark.parametrize(
        "reference",
        ["/etc/passwd", "C:\\Windows\\system32", "C:/Windows", "\\\\server\\share", "//server/share"],
    )
    def test_absolute_paths_rejected(self, reference: str) -> None:
        with pytest.raises(SecurityError):
            validate_reference(reference)

    def test_null_byte_rejected(self) -> None:
        with pytest.raises(SecurityError) as exc:
            validate_reference("a\0b")
        assert str(exc.value) == SecurityError.NULL_BYTE

    def test_encoded_absolute_rejected(self) -> None:
        with pytest.raises(SecurityError):
            validate_reference("%2Fetc%2Fpasswd")

    def test_relative_reference_passes(self) -> None:
        assert validate_reference("../sibling/file") == "../sibling/file"


class TestIsWithin:
    def test_child_is_within(self, tmp_path: Path) -> None:
        assert is_within(tmp_path / "docs" / "a.md", tmp_path / "docs")

    def test_root_is_within_itself(self, tmp_path: Path) -> None:
        assert is_within(tmp_path, tmp_path)

    def test_prefix_sibling_is_not_within(self, tmp_path: Path) -> None:
        """Comparison is by path components, not string prefix."""
        assert not is_within(tmp_path / "docs-evil" / "a.md", tmp_path / "docs")

    def test_dotdot_escape_is_not_within(self, tmp_path: Path) -> None:
        assert not is_within(tmp_path / "docs" / ".." / "secret.md", tmp_path / "docs")

    def test_symlink_escape_is_not_within(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.md").write_text("secret", encoding="utf-8")
        root = tmp_path / "docs"
        root.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)
        assert not is_within(root / "link" / "secret.md", root)

    def test_ensure_within_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SecurityError) as exc:
            ensure_within(tmp_path / ".." / "x.md", tmp_path, "../x")
        assert "outside base directory" in str(exc.value)
