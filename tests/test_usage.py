"""Tests for the plain-text environment listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated

import pytest

from envbind.errors import DefaultEncodingError
from envbind.schema import Schema
from envbind.tags import Env
from envbind.usage import COLUMN_WIDTH, format_help, format_option


@dataclass
class NameDotName:
    """A ``head.tail`` pair."""

    head: str = ""
    tail: str = ""

    @classmethod
    def from_text(cls, text: str) -> NameDotName:
        head, sep, tail = text.partition(".")
        if not sep:
            raise ValueError(f"{text}: missing period")
        return cls(head, tail)

    def to_text(self) -> str:
        return f"{self.head}.{self.tail}"

    def __bool__(self) -> bool:
        return bool(self.head or self.tail)


class Unrenderable(int):
    """Decodes from text but cannot be rendered back."""

    @classmethod
    def from_text(cls, text: str) -> Unrenderable:
        return cls(0)

    def to_text(self) -> str:
        raise ValueError("there was a problem")


@dataclass
class UsageArgs:
    input: Annotated[str, Env("")] = ""
    output: Annotated[list[str], Env("", help="list of outputs")] = field(default_factory=list)
    name: Annotated[str, Env(help="name to use")] = ""
    value: Annotated[int, Env(help="secret value")] = 0
    verbose: Annotated[bool, Env("name:v", help="verbosity level")] = False
    dataset: Annotated[str, Env(help="dataset to use")] = ""
    optimize: Annotated[int, Env("name:O", help="optimization level")] = 0
    ids: Annotated[list[int], Env(help="Ids")] = field(default_factory=list)
    values: Annotated[list[float], Env(help="Values")] = field(default_factory=list)
    workers: Annotated[
        int, Env("name:WORKERS", help="number of workers to start", default="10")
    ] = 0
    test_env: Annotated[str, Env("name:TEST_ENV")] = ""
    file: Annotated[
        NameDotName | None, Env("name:f", help="File with mandatory extension")
    ] = None


@dataclass
class LabelArgs:
    label: str = ""
    content: Annotated[str, Env(default="dog")] = ""


@dataclass
class UnrenderableArgs:
    name: Unrenderable | None = None


@dataclass
class Described:
    def description(self) -> str:
        return "this program does this and that"


@dataclass
class LongNameArgs:
    verbose_mode: Annotated[bool, Env("name:A_VERY_LONG_VARIABLE_NAME", help="long one")] = False


class TestFormatOption:
    """Tests for single listing lines."""

    def test_name_only(self) -> None:
        """Test a bare name is indented and terminated."""
        assert format_option("input") == "  input\n"

    def test_help_aligned_to_column(self) -> None:
        """Test help text starts at the column."""
        line = format_option("output", "list of outputs")
        assert line.index("list") == COLUMN_WIDTH

    def test_default_without_help(self) -> None:
        """Test a default follows the name directly when there is no help."""
        assert format_option("label", default="cat") == "  label [default: cat]\n"

    def test_long_name_wraps(self) -> None:
        """Test names reaching the column push help onto the next line."""
        name = "X" * (COLUMN_WIDTH - 4)
        assert format_option(name, "help") == f"  {name}\n{' ' * COLUMN_WIDTH}help\n"

    def test_empty_default_omitted(self) -> None:
        """Test an empty default is not shown."""
        assert format_option("a", default="") == "  a\n"


class TestSchemaHelp:
    """Tests for schema listings."""

    def test_write_usage(self) -> None:
        """Test the full listing with names, help text and defaults."""
        expected = (
            "Environments:\n"
            "  input\n"
            "  output                 list of outputs\n"
            "  name                   name to use [default: Foo Bar]\n"
            "  value                  secret value [default: 42]\n"
            "  v                      verbosity level\n"
            "  dataset                dataset to use\n"
            "  O                      optimization level\n"
            "  ids                    Ids\n"
            "  values                 Values [default: 3.14,42,256]\n"
            "  WORKERS                number of workers to start [default: 10]\n"
            "  TEST_ENV\n"
            "  f                      File with mandatory extension [default: scratch.txt]\n"
        )

        args = UsageArgs(
            name="Foo Bar",
            value=42,
            values=[3.14, 42, 256],
            file=NameDotName("scratch", "txt"),
        )
        assert Schema(args).help() == expected

    def test_defaults_captured_at_construction(self) -> None:
        """Test later changes to preset values do not alter the listing."""
        args = LabelArgs(label="cat")
        schema = Schema(args)
        args.label = "should_ignore_this"

        assert schema.help() == "Environments:\n  label [default: cat]\n  content [default: dog]\n"

    def test_cannot_render_default(self) -> None:
        """Test a preset value that fails to render aborts construction."""
        args = UnrenderableArgs(name=Unrenderable(42))

        with pytest.raises(DefaultEncodingError) as exc_info:
            Schema(args)

        assert str(exc_info.value) == (
            "args.name: error marshaling default value to string: there was a problem"
        )

    def test_description(self) -> None:
        """Test the description line is printed and empty schemas list nothing else."""
        schema = Schema(Described())
        assert schema.description == "this program does this and that"
        assert schema.help() == "this program does this and that\n"

    def test_long_name(self) -> None:
        """Test a long key is listed on its own line."""
        help_text = Schema(LongNameArgs()).help()
        assert help_text == (
            "Environments:\n  A_VERY_LONG_VARIABLE_NAME\n" + " " * COLUMN_WIDTH + "long one\n"
        )

    def test_format_help_without_slots(self) -> None:
        """Test an empty listing is empty."""
        assert format_help([]) == ""
