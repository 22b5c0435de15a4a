from productivity.realtime.rooms import room_for_user


def test_room_for_user_is_deterministic():
    assert room_for_user("42") == "user:42"
    assert room_for_user("42") == room_for_user("42")


def test_room_for_user_custom_prefix():
    assert room_for_user("42", prefix="private_") == "private_42"


def test_private_rooms_do_not_collide():
    assert room_for_user("4") != room_for_user("42")
