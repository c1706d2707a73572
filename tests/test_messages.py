"""Tests for chat editor messages, explanation code blocks and version comparison."""

from __future__ import annotations

from chat_content.segmentation.code_blocks import extract_code_blocks, guess_language
from chat_content.segmentation.diff import compare_chat_bubbles, compare_versions, compute_word_diff
from chat_content.segmentation.messages import (
    DEFAULT_TAKEAWAY_ICON,
    DEFAULT_TAKEAWAY_TITLE,
    parse_conversation,
    serialize_messages,
)
from chat_content.segmentation.models import (
    BubbleStatus,
    ChatMessage,
    ChatSegment,
    DiffType,
    MessageType,
    WordChange,
)


class TestParseConversation:
    def test_plain_messages(self) -> None:
        messages = parse_conversation("Mentor: hi\nStudent: hello")
        assert [(m.id, m.speaker, m.content) for m in messages] == [
            ("msg-0-Mentor", "Mentor", "hi"),
            ("msg-1-Student", "Student", "hello"),
        ]
        assert all(m.type is MessageType.MESSAGE for m in messages)

    def test_takeaway_with_icon_and_title(self) -> None:
        text = (
            "Mentor: hi\n"
            "Student: hello\n"
            "TAKEAWAY: [TAKEAWAY:💡:Remember]: Lists are zero-indexed."
        )
        messages = parse_conversation(text)
        takeaway = messages[-1]
        assert takeaway.id == "takeaway-2"
        assert takeaway.type is MessageType.TAKEAWAY
        assert takeaway.takeaway_icon == "💡"
        assert takeaway.takeaway_title == "Remember"
        assert takeaway.content == "Lists are zero-indexed."

    def test_takeaway_defaults(self) -> None:
        messages = parse_conversation("TAKEAWAY: [TAKEAWAY]: Keep it simple")
        assert len(messages) == 1
        assert messages[0].takeaway_icon == DEFAULT_TAKEAWAY_ICON
        assert messages[0].takeaway_title == DEFAULT_TAKEAWAY_TITLE
        assert messages[0].content == "Keep it simple"

    def test_takeaway_speaker_without_prefix(self) -> None:
        messages = parse_conversation("TAKEAWAY: plain note", allow_single=True)
        assert messages[0].type is MessageType.TAKEAWAY
        assert messages[0].content == "plain note"

    def test_freeform_canvas(self) -> None:
        messages = parse_conversation('FREEFORM: [FREEFORM_CANVAS]:{"shapes":[]}')
        assert len(messages) == 1
        assert messages[0].id == "freeform-0"
        assert messages[0].type is MessageType.FREEFORM
        assert messages[0].content == '{"shapes":[]}'
        assert messages[0].freeform_data == {"shapes": []}

    def test_freeform_invalid_json(self) -> None:
        messages = parse_conversation("FREEFORM: [FREEFORM_CANVAS]:not json")
        assert messages[0].freeform_data is None
        assert messages[0].content == "not json"

    def test_not_a_conversation(self) -> None:
        assert parse_conversation("Just a paragraph.") == []


class TestSerializeMessages:
    def test_messages_and_explanation(self) -> None:
        messages = [
            ChatMessage(id="a", speaker="Mentor", content="hi"),
            ChatMessage(id="b", speaker="Student", content="hello"),
        ]
        assert serialize_messages(messages, "  Because.  ") == (
            "Mentor: hi\n\nStudent: hello\n---\nBecause."
        )

    def test_takeaway_defaults(self) -> None:
        message = ChatMessage(id="t", speaker="TAKEAWAY", content="Tip", type=MessageType.TAKEAWAY)
        assert serialize_messages([message]) == (
            f"TAKEAWAY: [TAKEAWAY:{DEFAULT_TAKEAWAY_ICON}:{DEFAULT_TAKEAWAY_TITLE}]: Tip"
        )

    def test_freeform_payload(self) -> None:
        empty = ChatMessage(id="f", speaker="FREEFORM", content="", type=MessageType.FREEFORM)
        assert serialize_messages([empty]) == "FREEFORM: [FREEFORM_CANVAS]:{}"

        with_data = ChatMessage(
            id="f", speaker="FREEFORM", content="", type=MessageType.FREEFORM, freeform_data={"a": 1}
        )
        assert serialize_messages([with_data]) == 'FREEFORM: [FREEFORM_CANVAS]:{"a":1}'

    def test_freeform_empty_payload_kept(self) -> None:
        for data, expected in (([], "[]"), ({}, "{}"), (0, "0")):
            message = ChatMessage(
                id="f", speaker="FREEFORM", content="", type=MessageType.FREEFORM, freeform_data=data
            )
            assert serialize_messages([message]) == f"FREEFORM: [FREEFORM_CANVAS]:{expected}"

    def test_parses_back(self) -> None:
        messages = [
            ChatMessage(id="a", speaker="Mentor", content="hi\nsecond line"),
            ChatMessage(
                id="t",
                speaker="TAKEAWAY",
                content="Tip",
                type=MessageType.TAKEAWAY,
                takeaway_icon="💡",
                takeaway_title="Remember",
            ),
            ChatMessage(
                id="f", speaker="FREEFORM", content="", type=MessageType.FREEFORM, freeform_data={"a": 1}
            ),
        ]
        parsed = parse_conversation(serialize_messages(messages, "Why"), allow_single=True)
        assert [m.type for m in parsed] == [
            MessageType.MESSAGE,
            MessageType.TAKEAWAY,
            MessageType.FREEFORM,
        ]
        assert parsed[0].content == "hi\nsecond line"
        assert parsed[1].takeaway_title == "Remember"
        assert parsed[2].freeform_data == {"a": 1}


class TestCodeBlocks:
    def test_block_replaced_with_placeholder(self) -> None:
        html = (
            "<p>Intro</p>"
            '<pre class="ql-syntax" spellcheck="false">def f():<br>    return 1 &lt; 2</pre>'
            "<p>End</p>"
        )
        processed, blocks = extract_code_blocks(html)
        assert processed == "<p>Intro</p><!--CODE_BLOCK_0--><p>End</p>"
        assert len(blocks) == 1
        assert blocks[0].code == "def f():\n    return 1 < 2"
        assert blocks[0].language == "python"

    def test_multiple_blocks_numbered(self) -> None:
        html = '<pre class="ql-syntax">const a = 1;</pre><pre class="ql-syntax">SELECT 1</pre>'
        processed, blocks = extract_code_blocks(html)
        assert processed == "<!--CODE_BLOCK_0--><!--CODE_BLOCK_1-->"
        assert [b.language for b in blocks] == ["javascript", "sql"]

    def test_plain_pre_untouched(self) -> None:
        html = "<pre>not highlighted</pre>"
        assert extract_code_blocks(html) == (html, [])

    def test_guess_language(self) -> None:
        assert guess_language("let x = 2") == "javascript"
        assert guess_language("select * from t") == "sql"
        assert guess_language("echo hi") == "python"


class TestCompareChatBubbles:
    def test_modified_and_added(self) -> None:
        changes = compare_chat_bubbles(
            "Alice: hi\nBob: hello",
            "Alice: hi\nBob: hello there\nAlice: bye",
        )
        assert [c.status for c in changes] == [
            BubbleStatus.UNCHANGED,
            BubbleStatus.MODIFIED,
            BubbleStatus.ADDED,
        ]
        assert changes[1].old_bubble == ChatSegment(speaker="Bob", content="hello")
        assert changes[1].bubble.content == "hello there"

    def test_first_version_all_added(self) -> None:
        changes = compare_chat_bubbles("", "Alice: hi\nBob: hello")
        assert [c.status for c in changes] == [BubbleStatus.ADDED, BubbleStatus.ADDED]

    def test_removed(self) -> None:
        changes = compare_chat_bubbles("Alice: hi\nBob: hello", "Alice: hi")
        assert [c.status for c in changes] == [BubbleStatus.UNCHANGED, BubbleStatus.REMOVED]
        assert changes[1].bubble.speaker == "Bob"


class TestComputeWordDiff:
    def test_replaced_word(self) -> None:
        assert compute_word_diff("the quick fox", "the slow fox") == [
            WordChange(text="the ", status=BubbleStatus.UNCHANGED),
            WordChange(text="quick", status=BubbleStatus.REMOVED),
            WordChange(text="slow", status=BubbleStatus.ADDED),
            WordChange(text=" fox", status=BubbleStatus.UNCHANGED),
        ]

    def test_appended_words_merged(self) -> None:
        assert compute_word_diff("one", "one two three") == [
            WordChange(text="one", status=BubbleStatus.UNCHANGED),
            WordChange(text=" two three", status=BubbleStatus.ADDED),
        ]

    def test_tags_are_tokens(self) -> None:
        changes = compute_word_diff("<p>hi</p>", "<p><b>hi</b></p>")
        assert [c.status for c in changes] == [
            BubbleStatus.UNCHANGED,
            BubbleStatus.ADDED,
            BubbleStatus.UNCHANGED,
            BubbleStatus.ADDED,
            BubbleStatus.UNCHANGED,
        ]
        assert "".join(c.text for c in changes if c.status is not BubbleStatus.REMOVED) == (
            "<p><b>hi</b></p>"
        )

    def test_identical(self) -> None:
        assert compute_word_diff("same text", "same text") == [
            WordChange(text="same text", status=BubbleStatus.UNCHANGED)
        ]


class TestCompareVersions:
    def test_chat_content_compared_by_bubble(self) -> None:
        diff = compare_versions("Alice: hi\nBob: hello", "Alice: hi\nBob: bye")
        assert diff.type is DiffType.CHAT
        assert diff.is_first_version is False
        assert [c.status for c in diff.bubbles] == [BubbleStatus.UNCHANGED, BubbleStatus.MODIFIED]
        assert diff.words == []

    def test_non_chat_content_compared_by_word(self) -> None:
        diff = compare_versions("Note: draft", "Note: final")
        assert diff.type is DiffType.RICH
        assert diff.bubbles == []
        assert [(w.text, w.status) for w in diff.words] == [
            ("Note: ", BubbleStatus.UNCHANGED),
            ("draft", BubbleStatus.REMOVED),
            ("final", BubbleStatus.ADDED),
        ]

    def test_newer_version_decides_the_diff_type(self) -> None:
        diff = compare_versions("Alice: hi\nBob: hello", "Plain prose now.")
        assert diff.type is DiffType.RICH

    def test_first_version_rich_text_all_added(self) -> None:
        diff = compare_versions("", "<p>Intro</p>")
        assert diff.is_first_version is True
        assert diff.words == [WordChange(text="<p>Intro</p>", status=BubbleStatus.ADDED)]

    def test_first_version_chat_all_added(self) -> None:
        diff = compare_versions(None, "Alice: hi\nBob: hello")
        assert diff.type is DiffType.CHAT
        assert diff.is_first_version is True
        assert [c.status for c in diff.bubbles] == [BubbleStatus.ADDED, BubbleStatus.ADDED]
