import re

from lumai.util.braces import find_marked_block, find_matching_brace, strip_marked_blocks

MARKER = re.compile("CALL")


def test_find_matching_brace_handles_nesting():
    text = '{"a":{"b":1}} tail'
    assert find_matching_brace(text, 0) == 12


def test_find_matching_brace_unmatched():
    assert find_matching_brace('{"a":{"b":1}', 0) is None


def test_find_marked_block_requires_brace_after_marker():
    assert find_marked_block("CALL without json", MARKER) is None
    found = find_marked_block('xCALL {"k": 1} y', MARKER)
    assert found is not None
    match, start, end = found
    assert match.start() == 1
    assert (start, end) == (6, 13)


def test_strip_marked_blocks_removes_every_span():
    text = 'a CALL {"x": 1} b CALL {"y": {"z": 2}} c'
    assert strip_marked_blocks(text, MARKER).split() == ["a", "b", "c"]


def test_strip_marked_blocks_is_bounded():
    text = 'CALL {} ' * 10
    assert strip_marked_blocks(text, MARKER, max_passes=3).count("CALL") == 7
