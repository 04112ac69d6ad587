"""Tests for barrels.collation."""

from __future__ import annotations

from barrels.collation import locale_key


def test_letters_compare_case_insensitively() -> None:
    names = ["banana", "Apple", "cherry"]

    assert sorted(names, key=locale_key) == ["Apple", "banana", "cherry"]


def test_lowercase_sorts_before_uppercase_on_ties() -> None:
    assert sorted(["B", "b"], key=locale_key) == ["b", "B"]


def test_punctuation_and_digits_sort_before_letters() -> None:
    names = ["./b.tsx", "./_a.tsx", "./1.tsx", "./a.tsx", "./-z.tsx"]

    assert sorted(names, key=locale_key) == [
        "./_a.tsx",
        "./-z.tsx",
        "./1.tsx",
        "./a.tsx",
        "./b.tsx",
    ]


def test_accented_letters_sort_with_their_base_letter() -> None:
    names = ["./z.tsx", "./f.tsx", "./é.tsx", "./e.tsx", "./Éa.tsx"]

    assert sorted(names, key=locale_key) == [
        "./e.tsx",
        "./é.tsx",
        "./Éa.tsx",
        "./f.tsx",
        "./z.tsx",
    ]
