import socket

import pytest

from shared.protocol import Role
from shared.session import ChatSession, EndReason


def _refuse_input(prompt):
    raise AssertionError("local input should not be requested")


def test_initiator_sentinel_ends_without_receiving(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"pending")
    reader = scripted(["exit"])

    outcome = ChatSession(left, Role.INITIATOR, settings, reader, display).run()

    assert outcome.reason is EndReason.SENTINEL_SENT
    assert right.recv(1024) == b"exit"
    assert outcome.received == []
    assert display.lines == []
    # The queued reply was never consumed.
    assert left.recv(1024) == b"pending"


def test_initiator_sends_then_displays_reply(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"hi back")
    reader = scripted(["hello", "exit"])

    outcome = ChatSession(left, Role.INITIATOR, settings, reader, display).run()

    assert outcome.reason is EndReason.SENTINEL_SENT
    assert display.lines == ["Server: hi back"]
    assert reader.prompts == ["Client: ", "Client: "]
    assert right.recv(1024) == b"helloexit"
    assert [m.payload for m in outcome.sent] == [b"hello", b"exit"]


def test_responder_receives_first(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"hello")
    reader = scripted(["exit"])

    outcome = ChatSession(left, Role.RESPONDER, settings, reader, display).run()

    assert display.lines == ["Client:hello"]
    assert reader.prompts == ["Server: "]
    assert outcome.reason is EndReason.SENTINEL_SENT
    assert right.recv(1024) == b"exit"


def test_responder_ends_gracefully_when_peer_closes(pair, settings, display):
    left, right = pair
    right.close()

    outcome = ChatSession(left, Role.RESPONDER, settings, _refuse_input, display).run()

    assert outcome.reason is EndReason.PEER_CLOSED
    assert outcome.transcript == []


def test_responder_displays_received_sentinel_like_any_message(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"exit")
    right.shutdown(socket.SHUT_WR)
    reader = scripted(["still here"])

    outcome = ChatSession(left, Role.RESPONDER, settings, reader, display).run()

    assert display.lines == ["Client:exit"]
    assert outcome.reason is EndReason.PEER_CLOSED
    assert [m.payload for m in outcome.sent] == [b"still here"]


def test_full_buffer_message_round_trips(pair, settings, display, scripted):
    left, right = pair
    body = b"x" * settings.buffer_size
    right.sendall(body)
    reader = scripted(["exit"])

    outcome = ChatSession(left, Role.RESPONDER, settings, reader, display).run()

    assert outcome.received[0].payload == body
    assert display.lines == ["Client:" + "x" * settings.buffer_size]


def test_oversized_transmission_is_split_at_buffer_capacity(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"a" * 1500)
    right.shutdown(socket.SHUT_WR)
    reader = scripted(["ok", "ok again"])

    outcome = ChatSession(left, Role.RESPONDER, settings, reader, display).run()

    assert [m.size for m in outcome.received] == [1024, 476]
    assert outcome.reason is EndReason.PEER_CLOSED


def test_quick_sends_coalesce_into_one_message(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"one")
    right.sendall(b"two")
    right.shutdown(socket.SHUT_WR)
    reader = scripted(["ok"])

    outcome = ChatSession(left, Role.RESPONDER, settings, reader, display).run()

    assert display.lines == ["Client:onetwo"]
    assert outcome.reason is EndReason.PEER_CLOSED


def test_small_buffer_setting_is_honoured(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"abcdef")
    right.shutdown(socket.SHUT_WR)
    reader = scripted(["1", "2"])
    small = settings.with_overrides(buffer_size=4)

    outcome = ChatSession(left, Role.RESPONDER, small, reader, display).run()

    assert display.lines == ["Client:abcd", "Client:ef"]


def test_invalid_utf8_is_displayed_with_replacement(pair, settings, display, scripted):
    left, right = pair
    right.sendall(b"caf\xe9")
    right.shutdown(socket.SHUT_WR)
    reader = scripted(["ok"])

    ChatSession(left, Role.RESPONDER, settings, reader, display).run()

    assert display.lines == ["Client:caf�"]


def test_closed_local_input_ends_session(pair, settings, display, scripted):
    left, right = pair
    outcome = ChatSession(left, Role.INITIATOR, settings, scripted([]), display).run()

    assert outcome.reason is EndReason.INPUT_CLOSED
    assert outcome.transcript == []


def test_custom_sentinel(pair, settings, display, scripted):
    left, right = pair
    reader = scripted(["exit", "bye"])
    right.sendall(b"ack")

    outcome = ChatSession(left, Role.INITIATOR, settings.with_overrides(sentinel="bye"), reader, display).run()

    assert outcome.reason is EndReason.SENTINEL_SENT
    assert display.lines == ["Server: ack"]


def test_send_to_closed_peer_ends_session(settings, display, scripted):
    left, right = socket.socketpair()
    right.close()
    try:
        outcome = ChatSession(left, Role.INITIATOR, settings, scripted(["hello"] * 3), display).run()
    finally:
        left.close()
    assert outcome.reason is EndReason.PEER_CLOSED


@pytest.mark.parametrize("role", [Role.INITIATOR, Role.RESPONDER])
def test_role_accepts_plain_strings(pair, settings, display, scripted, role):
    left, right = pair
    right.close()
    session = ChatSession(left, role.value, settings, scripted(["hi"]), display)
    assert session.role is role


def test_undecodable_terminal_bytes_are_sent_unchanged(pair, settings, display, scripted):
    left, right = pair
    # How input() hands over a 0xff byte it could not decode as UTF-8.
    reader = scripted(["bad\udcff", "exit"])
    right.sendall(b"ok")

    outcome = ChatSession(left, Role.INITIATOR, settings, reader, display).run()

    assert outcome.reason is EndReason.SENTINEL_SENT
    assert outcome.sent[0].payload == b"bad\xff"
    assert right.recv(1024) == b"bad\xffexit"


def test_line_the_encoding_cannot_carry_is_not_sent(pair, settings, display, scripted):
    left, right = pair
    ascii_only = settings.with_overrides(encoding="ascii")
    reader = scripted(["café", "cafe"])
    right.shutdown(socket.SHUT_WR)

    outcome = ChatSession(left, Role.INITIATOR, ascii_only, reader, display).run()

    assert outcome.reason is EndReason.PEER_CLOSED
    assert [m.payload for m in outcome.sent] == [b"cafe"]
    assert display.lines == ["Cannot send that line as ascii, try again."]
    assert reader.prompts == ["Client: ", "Client: "]
    assert right.recv(1024) == b"cafe"


def test_unencodable_input_then_closed_input_ends_quietly(pair, settings, display, scripted):
    left, right = pair
    ascii_only = settings.with_overrides(encoding="ascii")

    outcome = ChatSession(left, Role.INITIATOR, ascii_only, scripted(["naïve"]), display).run()

    assert outcome.reason is EndReason.INPUT_CLOSED
    assert outcome.transcript == []
