import re

from rsvp_api.ids import generate_guest_id, generate_id, random_token


def test_generate_id_is_twenty_alphanumerics():
    value = generate_id()

    assert re.fullmatch(r"[A-Za-z0-9]{20}", value)


def test_random_token_is_not_repeated():
    assert len({random_token() for _ in range(50)}) == 50


def test_guest_id_is_built_from_name():
    value = generate_guest_id("Anne-Marie", "O'Neil")

    assert re.fullmatch(r"AnneMarie-ONeil-[A-Za-z0-9]{12}", value)


def test_guest_id_skips_empty_name_parts():
    value = generate_guest_id("Cher", "  ")

    assert re.fullmatch(r"Cher-[A-Za-z0-9]{12}", value)


def test_guest_id_without_usable_name_falls_back_to_token():
    value = generate_guest_id("!!", None)

    assert re.fullmatch(r"[A-Za-z0-9]{20}", value)
