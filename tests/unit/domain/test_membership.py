"""Unit tests for the Membership entity."""

from uuid import uuid4

import pytest

from domain.entities.membership import ChatTarget, Membership, MembershipRole, QueueTarget


class TestMembershipTarget:
    def test_for_queue_is_pending(self):
        queue_id = uuid4()

        membership = Membership.for_queue(queue_id, uuid4(), MembershipRole.CREATOR)

        assert membership.target == QueueTarget(queue_id)
        assert membership.is_pending
        assert membership.chat_id is None
        assert membership.role == MembershipRole.CREATOR

    def test_repoint_moves_onto_chat(self):
        queue_id, chat_id = uuid4(), uuid4()
        pending = Membership.for_queue(queue_id, uuid4())

        realized = pending.repoint(chat_id)

        assert realized.target == ChatTarget(chat_id)
        assert realized.chat_id == chat_id
        assert not realized.is_pending
        assert realized.queue_id == queue_id
        assert realized.id == pending.id
        assert realized.user_id == pending.user_id
        assert pending.is_pending

    def test_repoint_twice_is_rejected(self):
        realized = Membership.for_queue(uuid4(), uuid4()).repoint(uuid4())

        with pytest.raises(ValueError, match="already belongs to chat"):
            realized.repoint(uuid4())
