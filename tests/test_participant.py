"""Tests for joining and leaving groups."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from groupfit import create_app
from groupfit.core.constants import PARTICIPANTS_COLLECTION
from groupfit.errors import (
    DuplicateResourceError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from groupfit.participant.services import ParticipantService
from tests.mock_utils import FakeGroupStore, make_db, make_snapshot


class ParticipantServiceTestCase(unittest.TestCase):
    """Test case for ParticipantService."""

    def setUp(self) -> None:
        """Push an app context and build a mocked client."""
        self.app = create_app({"TESTING": True})
        self.app_context = self.app.app_context()
        self.app_context.push()

        refresh_patcher = patch(
            "groupfit.participant.services.BadgeService.refresh_group_badges"
        )
        self.mock_refresh = refresh_patcher.start()
        self.addCleanup(refresh_patcher.stop)

        self.groups = MagicMock()
        self.participants = MagicMock()
        self.db = make_db(groups=self.groups, participants=self.participants)
        self.group_doc = make_snapshot("group1", {"name": "Runners", "ownerId": "owner1"})
        self.groups.document.return_value.get.return_value = self.group_doc
        self.nickname_query = (
            self.participants.where.return_value.where.return_value.limit.return_value
        )

    def tearDown(self) -> None:
        """Pop the app context."""
        self.app_context.pop()

    def test_join_group(self) -> None:
        """Joining writes the participant and bumps participantCount."""
        self.nickname_query.stream.return_value = []
        participant_ref = self.participants.document.return_value
        participant_ref.get.return_value = make_snapshot(
            "p2", {"groupId": "group1", "nickname": "bob", "password": "pw"}
        )

        result = ParticipantService.join_group(self.db, "group1", "bob", "pw")

        self.assertEqual(result["id"], "p2")
        self.assertEqual(result["nickname"], "bob")
        self.assertNotIn("password", result)
        self.assertEqual(result["group"]["id"], "group1")

        batch = self.db.batch.return_value
        update_args, _ = batch.update.call_args
        self.assertEqual(update_args[1]["participantCount"].value, 1)
        batch.commit.assert_called_once()
        self.mock_refresh.assert_called_once_with(self.db, "group1")

    def test_join_group_duplicate_nickname(self) -> None:
        """A nickname already used in the group is a conflict."""
        self.nickname_query.stream.return_value = [
            make_snapshot("p1", {"nickname": "alice"})
        ]

        with self.assertRaises(DuplicateResourceError) as ctx:
            ParticipantService.join_group(self.db, "group1", "alice", "pw")
        self.assertEqual(ctx.exception.path, "nickname")
        self.db.batch.assert_not_called()

    def test_join_missing_group(self) -> None:
        """Joining a missing group raises NotFoundError."""
        self.groups.document.return_value.get.return_value = make_snapshot(
            "nope", exists=False
        )

        with self.assertRaises(NotFoundError):
            ParticipantService.join_group(self.db, "nope", "bob", "pw")

    def test_leave_group(self) -> None:
        """Leaving deletes the participant and decrements participantCount."""
        participant = make_snapshot("p2", {"nickname": "bob", "password": "pw"})
        self.nickname_query.stream.return_value = [participant]

        ParticipantService.leave_group(self.db, "group1", "bob", "pw")

        batch = self.db.batch.return_value
        batch.delete.assert_called_once_with(participant.reference)
        update_args, _ = batch.update.call_args
        self.assertEqual(update_args[0], self.group_doc.reference)
        self.assertEqual(update_args[1]["participantCount"].value, -1)
        self.mock_refresh.assert_called_once_with(self.db, "group1")

    def test_leave_group_wrong_password(self) -> None:
        """A wrong password is rejected with the password path."""
        self.nickname_query.stream.return_value = [
            make_snapshot("p2", {"nickname": "bob", "password": "pw"})
        ]

        with self.assertRaises(UnauthorizedError) as ctx:
            ParticipantService.leave_group(self.db, "group1", "bob", "nope")
        self.assertEqual(ctx.exception.path, "password")
        self.db.batch.assert_not_called()

    def test_leave_group_unknown_nickname(self) -> None:
        """Leaving with an unknown nickname raises NotFoundError."""
        self.nickname_query.stream.return_value = []

        with self.assertRaises(NotFoundError) as ctx:
            ParticipantService.leave_group(self.db, "group1", "ghost", "pw")
        self.assertEqual(ctx.exception.path, "nickname")

    def test_owner_cannot_leave(self) -> None:
        """The group owner has to delete the group instead of leaving."""
        self.nickname_query.stream.return_value = [
            make_snapshot("owner1", {"nickname": "alice", "password": "secret"})
        ]

        with self.assertRaises(ValidationError):
            ParticipantService.leave_group(self.db, "group1", "alice", "secret")
        self.db.batch.assert_not_called()


class ParticipantBadgeTestCase(unittest.TestCase):
    """Test case for joins and leaves driving the PARTICIPANT_10 badge."""

    def setUp(self) -> None:
        """Seed a group with nine participants."""
        self.app = create_app({"TESTING": True})
        self.app_context = self.app.app_context()
        self.app_context.push()

        members = {
            f"m{i}": {"groupId": "group1", "nickname": f"member{i}", "password": "pw"}
            for i in range(9)
        }
        self.store = FakeGroupStore(
            "group1",
            {"ownerId": "m0", "participantCount": 9, "likeCount": 0, "badges": []},
            participants=members,
        )

    def tearDown(self) -> None:
        """Pop the app context."""
        self.app_context.pop()

    def test_participant_badge_follows_membership(self) -> None:
        """The tenth member awards PARTICIPANT_10 and their leaving removes it."""
        ParticipantService.join_group(self.store.db, "group1", "newbie", "pw")

        self.assertEqual(self.store.group["participantCount"], 10)
        self.assertEqual(self.store.group["badges"], ["PARTICIPANT_10"])

        ParticipantService.leave_group(self.store.db, "group1", "newbie", "pw")

        self.assertEqual(self.store.group["participantCount"], 9)
        self.assertEqual(self.store.group["badges"], [])
        self.assertEqual(len(self.store.participants), 9)


class NicknameLookupTestCase(unittest.TestCase):
    """Test case for nickname lookups against mockfirestore."""

    def setUp(self) -> None:
        """Seed participants in two groups."""
        self.db = MockFirestore()
        participants = self.db.collection(PARTICIPANTS_COLLECTION)
        participants.document("p1").set(
            {"groupId": "g1", "nickname": "alice", "password": "secret"}
        )
        participants.document("p2").set(
            {"groupId": "g2", "nickname": "bob", "password": "pw"}
        )

    def tearDown(self) -> None:
        """Reset the in-memory store."""
        self.db.reset()

    def test_nickname_is_scoped_to_group(self) -> None:
        """The same nickname in another group does not match."""
        self.assertIsNone(ParticipantService.find_by_nickname(self.db, "g2", "alice"))
        found = ParticipantService.find_by_nickname(self.db, "g1", "alice")
        self.assertEqual(found.id, "p1")

    def test_authenticate(self) -> None:
        """Nickname and password must both match."""
        doc = ParticipantService.authenticate(self.db, "g1", "alice", "secret")
        self.assertEqual(doc.id, "p1")

        with self.assertRaises(UnauthorizedError):
            ParticipantService.authenticate(self.db, "g1", "alice", "wrong")
        with self.assertRaises(UnauthorizedError):
            ParticipantService.authenticate(self.db, "g2", "alice", "secret")


class ParticipantRoutesTestCase(unittest.TestCase):
    """Test case for the participant blueprint."""

    def setUp(self) -> None:
        """Set up a test client with the service mocked out."""
        patchers = {
            "firestore": patch("groupfit.participant.routes.firestore"),
            "service": patch("groupfit.participant.routes.ParticipantService"),
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)
        self.mock_db = self.mocks["firestore"].client.return_value

        self.app = create_app({"TESTING": True, "SERVER_NAME": "localhost"})
        self.client = self.app.test_client()

    def test_join(self) -> None:
        """Joining returns 201 with the participant."""
        self.mocks["service"].join_group.return_value = {"id": "p2", "nickname": "bob"}

        response = self.client.post(
            "/groups/group1/participants", json={"nickname": "bob", "password": "pw"}
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["nickname"], "bob")
        self.mocks["service"].join_group.assert_called_once_with(
            self.mock_db, "group1", "bob", "pw"
        )

    def test_join_duplicate(self) -> None:
        """A duplicate nickname is a 409."""
        self.mocks["service"].join_group.side_effect = DuplicateResourceError(
            "Nickname is already taken in this group.", path="nickname"
        )

        response = self.client.post(
            "/groups/group1/participants", json={"nickname": "bob", "password": "pw"}
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["error"], "CONFLICT")

    def test_join_missing_password(self) -> None:
        """The password is required."""
        response = self.client.post(
            "/groups/group1/participants", json={"nickname": "bob"}
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["path"], "password")

    def test_leave(self) -> None:
        """Leaving returns an empty 204."""
        response = self.client.delete(
            "/groups/group1/participants", json={"nickname": "bob", "password": "pw"}
        )

        self.assertEqual(response.status_code, 204)
        self.mocks["service"].leave_group.assert_called_once_with(
            self.mock_db, "group1", "bob", "pw"
        )


if __name__ == "__main__":
    unittest.main()
