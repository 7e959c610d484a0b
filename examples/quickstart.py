"""Quickstart - stateparse in six short examples.

Demonstrates:

1. Primitives and run()
2. Sequencing, alternation and repetition
3. Recursive grammars with lazy() and Forward
4. Context-dependent grammars with contextual()
5. Binary input addressed bit by bit
6. Reporting failures

Python 3.13+.
"""

from __future__ import annotations


def example_1_primitives() -> None:
    """Run primitive matchers over text."""
    from stateparse import digits, letters, run, string

    print("=" * 60)
    print("Example 1: Primitives")
    print("=" * 60)

    for parser, text in [(string("hello"), "hello world"), (letters, "abc123"), (digits, "42!")]:
        state = run(parser, text)
        print(f"{parser!r:30} on {text!r:15} -> {state.result!r} (index {state.index})")

    failed = run(digits, "abc")
    print(f"digits on 'abc' -> error: {failed.error}")
    print()


def example_2_combinators() -> None:
    """Combine parsers structurally."""
    from stateparse import between, choice, digits, letters, many, run, sep_by, sequence_of, string

    print("=" * 60)
    print("Example 2: Combinators")
    print("=" * 60)

    print(run(sequence_of([letters, digits, letters]), "abc123def").result)
    print(run(many(choice([letters, digits])), "ab12cd").result)
    print(run(sep_by(string(","))(digits), "1,2,3").result)
    print(run(between(string("("), string(")"))(letters), "(abc)").result)
    print()


def example_3_recursion() -> None:
    """Parse nested lists recursively."""
    from stateparse import Forward, between, choice, digits, lazy, run, sep_by, string

    print("=" * 60)
    print("Example 3: Recursive Grammars")
    print("=" * 60)

    comma_list = sep_by(string(","))
    brackets = between(string("["), string("]"))

    value = lazy(lambda: choice([digits, brackets(comma_list(value))]))
    print(f"lazy:    {run(value, '[1,[2,3],[]]').result}")

    cell = Forward("value")
    cell.define(choice([digits, brackets(comma_list(cell.parser))]))
    print(f"Forward: {run(cell.parser, '[[4],5]').result}")
    print()


def example_4_contextual() -> None:
    """Choose the next step from an earlier result."""
    from stateparse import choice, contextual, digits, letters, run, string

    print("=" * 60)
    print("Example 4: Contextual Grammars")
    print("=" * 60)

    @contextual
    def declaration():  # type: ignore[no-untyped-def]
        name = yield letters
        type_tag = yield choice([string(":int="), string(":str=")])
        value = yield digits.map(int) if type_tag == ":int=" else letters
        return {"name": name, "value": value}

    for text in ["count:int=3", "label:str=hello", "bad:int=x"]:
        state = run(declaration, text)
        print(f"{text!r:20} -> {state.error or state.result}")
    print()


def example_5_binary() -> None:
    """Read a bit-packed header."""
    from stateparse import bit, one, run, sequence_of, zero

    print("=" * 60)
    print("Example 5: Binary Input")
    print("=" * 60)

    header = sequence_of([one, one, one, zero, one, zero, one, zero])
    state = run(header, bytes([0xEA, 0xEB]))
    print(f"header on EA EB -> {state.result} (bit index {state.index})")

    nibble = sequence_of([bit] * 4).map(lambda bits: int("".join(map(str, bits)), 2))
    print(f"first nibble of 0xB4 -> {run(nibble, b'\xb4').result}")
    print()


def example_6_errors() -> None:
    """Render failures for humans and tools."""
    from stateparse import DiagnosticFormatter, OutputFormat, choice, run, sequence_of, string

    print("=" * 60)
    print("Example 6: Error Reporting")
    print("=" * 60)

    grammar = sequence_of([string("let "), choice([string("x"), string("y")])])
    state = run(grammar, "let z")
    assert state.error is not None

    print(state.format_with_context())
    print()
    print(DiagnosticFormatter().format(state.error, state.target))
    print()
    print(DiagnosticFormatter(output_format=OutputFormat.JSON).format(state.error, state.target))
    print()


def main() -> None:
    """Run all examples."""
    print()
    print("stateparse Quickstart")
    print()

    example_1_primitives()
    example_2_combinators()
    example_3_recursion()
    example_4_contextual()
    example_5_binary()
    example_6_errors()

    print("=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
