import uuid

from schoolneeds.core.constants import UserRole
from schoolneeds.schemas.auth import UserResponse
from schoolneeds.client.session import AuthContext


def make_user(role=UserRole.PRINCIPAL):
    return UserResponse(id=uuid.uuid4(), email="p@school.sy", role=role)


def test_populate_and_clear():
    session = AuthContext()
    assert not session.is_authenticated
    assert session.role is None

    session.populate("token", make_user(UserRole.ADMIN))
    assert session.is_authenticated
    assert session.is_admin
    assert not session.is_principal

    session.clear()
    assert not session.is_authenticated
    assert session.user is None


def test_listeners_follow_transitions():
    session = AuthContext()
    states = []
    unsubscribe = session.on_change(lambda ctx: states.append(ctx.is_authenticated))

    session.populate("token", make_user())
    session.clear()
    session.clear()  # already empty
    assert states == [True, False]

    unsubscribe()
    session.populate("token", make_user())
    assert states == [True, False]


def test_failing_listener_does_not_block_others():
    session = AuthContext()
    seen = []

    def broken(ctx):
        raise RuntimeError("boom")

    session.on_change(broken)
    session.on_change(lambda ctx: seen.append(ctx.role))
    session.populate("token", make_user())
    assert seen == [UserRole.PRINCIPAL]
