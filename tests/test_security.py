from tour_booking.utils.security import BCRYPT_ROUNDS, hash_password, verify_password


def test_hash_then_verify_round_trip():
    hashed = hash_password("mypassword1")
    assert hashed != "mypassword1"
    assert verify_password("mypassword1", hashed)


def test_different_password_does_not_verify():
    hashed = hash_password("correct horse battery")
    assert not verify_password("correct horse battery staple", hashed)
    assert not verify_password("wrongpass", hashed)


def test_hash_is_salted():
    first = hash_password("samepassword")
    second = hash_password("samepassword")
    assert first != second
    assert verify_password("samepassword", first)
    assert verify_password("samepassword", second)


def test_hash_uses_cost_twelve():
    assert BCRYPT_ROUNDS == 12
    assert hash_password("mypassword1").split("$")[2] == "12"


def test_missing_hash_never_verifies():
    assert not verify_password("mypassword1", None)
    assert not verify_password("mypassword1", "")


def test_unhashable_candidate_does_not_verify():
    hashed = hash_password("mypassword1")
    assert verify_password("mypass\x00word1", hashed) is False
