from __future__ import annotations

import unittest

from kbtree.ansi import cell_width, clip_ansi_line

RED = "\x1b[31m"
RESET = "\x1b[0m"


class AnsiClipTests(unittest.TestCase):
    def test_escapes_do_not_count_toward_width(self) -> None:
        styled = f"{RED}notes{RESET}.md"

        self.assertEqual(clip_ansi_line(styled, 8), styled)
        self.assertEqual(clip_ansi_line(styled, 7), f"{RED}notes{RESET}.m")

    def test_clip_keeps_trailing_reset(self) -> None:
        self.assertEqual(clip_ansi_line(f"{RED}notes{RESET}.md", 3), f"{RED}not{RESET}")

    def test_wide_characters_use_two_cells_and_are_never_split(self) -> None:
        self.assertEqual([cell_width(ch) for ch in "文a"], [2, 1])
        self.assertEqual(clip_ansi_line("文档a", 3), "文")
        self.assertEqual(clip_ansi_line("文档a", 5), "文档a")

    def test_non_positive_width_clips_everything(self) -> None:
        self.assertEqual(clip_ansi_line("abc", 0), "")


if __name__ == "__main__":
    unittest.main()
