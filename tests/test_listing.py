import io

import pytest
from colorama import Fore, Style

from dumpnef.analysis.alignment import (
    InstructionLine,
    MethodEnd,
    MethodStart,
    SourceLine,
    build_plan,
)
from dumpnef.analysis.disassembler import address_width, disassemble
from dumpnef.debug_info import DebugInfo, Method, SequencePoint
from dumpnef.listing import (
    render_entry,
    render_listing,
    render_method_tokens,
    write_listing,
)
from tests.fixtures.scripts import GAS_TRANSFER, METHOD_SCRIPT, PUSH_HI


def test_instruction_line_format():
    entry = InstructionLine(4, "PUSHDATA1", "68-69", 'as text: "hi"')
    assert render_entry(entry, 3) == '004 PUSHDATA1 68-69 # as text: "hi"'


def test_instruction_line_without_operand_or_comment():
    assert render_entry(InstructionLine(7, "RET", "", ""), 1) == "7 RET"


def test_markers():
    assert render_entry(MethodStart(0, "Demo.Main"), 1) == "# Method Start Demo.Main"
    assert render_entry(MethodEnd(8, "Demo.Main"), 1) == "# Method End Demo.Main"
    assert (
        render_entry(SourceLine(0, "contract.cs", 1, "retur"), 1)
        == '# Code contract.cs line 1: "retur"'
    )


def test_unknown_entry_type():
    with pytest.raises(TypeError):
        render_entry(object(), 1)


def test_listing_without_debug_info():
    instructions = disassemble(PUSH_HI)
    text = render_listing(build_plan(instructions), address_width(instructions))
    assert text == '0 PUSHDATA1 68-69 # as text: "hi"\n\n4 RET'


def test_listing_groups_lines_by_address():
    instructions = disassemble(METHOD_SCRIPT)
    info = DebugInfo(
        documents=("contract.cs",),
        methods=(Method("Demo", "Main", (0, 8), (SequencePoint(0, 0, (1, 1), (1, 6)),)),),
    )
    plan = build_plan(instructions, info, lookup=lambda path: ["return 1;"])
    lines = render_listing(plan, address_width(instructions)).split("\n")

    assert lines[:4] == [
        "# Method Start Demo.Main",
        '# Code contract.cs line 1: "retur"',
        "0 PUSHINT8 01 # 1",
        "",
    ]
    assert lines[-3:] == ["", "8 RET", "# Method End Demo.Main"]
    assert lines[0] != "" and lines[-1] != ""


def test_colors():
    entry = InstructionLine(0, "PUSHINT8", "01", "1")
    colored = render_entry(entry, 1, colors=True)
    assert colored == (
        f"{Fore.YELLOW}0{Style.RESET_ALL}"
        f"{Fore.BLUE} PUSHINT8 01{Style.RESET_ALL}"
        f"{Fore.GREEN} # 1{Style.RESET_ALL}"
    )
    marker = render_entry(MethodStart(0, "Demo.Main"), 1, colors=True)
    assert marker.startswith(Fore.MAGENTA)


def test_write_listing_plain_has_no_escape_codes():
    instructions = disassemble(PUSH_HI)
    out = io.StringIO()
    write_listing(build_plan(instructions), out, address_width(instructions))
    assert out.getvalue() == '0 PUSHDATA1 68-69 # as text: "hi"\n\n4 RET\n'
    assert "\x1b" not in out.getvalue()


def test_render_method_tokens():
    assert render_method_tokens([GAS_TRANSFER]) == [
        "00-00: GasToken transfer",
        "\t4 parameters",
        "\thas return value",
        "\tAll call flags",
    ]


def test_render_method_tokens_index_is_little_endian():
    lines = render_method_tokens([GAS_TRANSFER] * 2)
    assert lines[4] == "01-00: GasToken transfer"


def test_render_no_method_tokens():
    assert render_method_tokens([]) == ["No Method Tokens in contract"]
