"""
Integration tests for organization and member endpoints.

Tests cover:
- Org CRUD and role requirements
- Guard error bodies (401 / 400 / 403)
- Org id sources: query, header, body
- Member management rules
"""

from __future__ import annotations

import uuid

from sqlalchemy import func
from sqlmodel import select

from aihub.models.assistant import Assistant
from aihub.models.membership import Membership

from .conftest import add_member, bearer, create_org, sign_up


class TestOrgCrud:
    async def test_create_makes_creator_owner(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, token, "acme")

        resp = await client.get("/api/v1/orgs", headers=bearer(token))
        assert resp.status_code == 200
        assert resp.json()["data"] == [
            {"id": org_id, "name": "Acme", "slug": "acme", "role": "owner"}
        ]

    async def test_duplicate_slug(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        await create_org(client, token, "acme")
        resp = await client.post(
            "/api/v1/orgs", json={"name": "Other", "slug": "acme"}, headers=bearer(token)
        )
        assert resp.status_code == 409

    async def test_invalid_slug(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        resp = await client.post(
            "/api/v1/orgs", json={"name": "Bad", "slug": "Not A Slug"}, headers=bearer(token)
        )
        assert resp.status_code == 422

    async def test_list_requires_session(self, client):
        resp = await client.get("/api/v1/orgs")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    async def test_get_current(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, token, "acme")
        resp = await client.get("/api/v1/orgs/current", headers=bearer(token, org_id))
        assert resp.status_code == 200
        assert resp.json()["slug"] == "acme"

    async def test_update_requires_admin(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        _, member = await sign_up(client, "bob@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "member")

        resp = await client.patch(
            "/api/v1/orgs/current", json={"name": "Renamed"}, headers=bearer(member, org_id)
        )
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}

        resp = await client.patch(
            "/api/v1/orgs/current", json={"name": "Renamed"}, headers=bearer(owner, org_id)
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Renamed"

    async def test_delete_requires_owner_and_cascades(self, client, database):
        _, owner = await sign_up(client, "ada@acme.com")
        _, admin = await sign_up(client, "bob@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "admin")
        resp = await client.post(
            "/api/v1/assistants", json={"name": "Helper"}, headers=bearer(owner, org_id)
        )
        assert resp.status_code == 201

        resp = await client.delete("/api/v1/orgs/current", headers=bearer(admin, org_id))
        assert resp.status_code == 403

        resp = await client.delete("/api/v1/orgs/current", headers=bearer(owner, org_id))
        assert resp.status_code == 204

        async with database.session() as session:
            memberships = await session.execute(select(func.count()).select_from(Membership))
            assistants = await session.execute(select(func.count()).select_from(Assistant))
            assert memberships.scalar_one() == 0
            assert assistants.scalar_one() == 0

        resp = await client.get("/api/v1/orgs", headers=bearer(owner))
        assert resp.json()["data"] == []


class TestGuardResponses:
    async def test_missing_org_id(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        resp = await client.get("/api/v1/orgs/current", headers=bearer(token))
        assert resp.status_code == 400
        assert resp.json() == {"error": "Organization ID is required"}

    async def test_missing_org_id_without_session(self, client):
        resp = await client.get("/api/v1/assistants")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Organization ID is required"}

    async def test_org_id_without_session(self, client):
        resp = await client.get("/api/v1/assistants", params={"orgId": str(uuid.uuid4())})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    async def test_non_member(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        _, outsider = await sign_up(client, "eve@acme.com")
        org_id = await create_org(client, owner, "acme")
        resp = await client.get("/api/v1/orgs/current", headers=bearer(outsider, org_id))
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}

    async def test_owner_of_one_org_is_stranger_to_another(self, client):
        _, alice = await sign_up(client, "alice@acme.com")
        _, bob = await sign_up(client, "bob@acme.com")
        o1 = await create_org(client, alice, "one")
        o2 = await create_org(client, bob, "two")

        assert (await client.get("/api/v1/orgs/current", headers=bearer(alice, o1))).status_code == 200
        assert (await client.get("/api/v1/orgs/current", headers=bearer(alice, o2))).status_code == 403

    async def test_org_id_from_query(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, token, "acme")
        resp = await client.get(
            "/api/v1/orgs/current", params={"orgId": org_id}, headers=bearer(token)
        )
        assert resp.status_code == 200

    async def test_org_id_from_body(self, client):
        _, token = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, token, "acme")
        resp = await client.post(
            "/api/v1/assistants",
            json={"orgId": org_id, "name": "Helper"},
            headers=bearer(token),
        )
        assert resp.status_code == 201
        assert resp.json()["org_id"] == org_id

    async def test_query_wins_over_header(self, client):
        _, alice = await sign_up(client, "alice@acme.com")
        _, bob = await sign_up(client, "bob@acme.com")
        mine = await create_org(client, alice, "mine")
        theirs = await create_org(client, bob, "theirs")

        resp = await client.get(
            "/api/v1/orgs/current", params={"orgId": theirs}, headers=bearer(alice, mine)
        )
        assert resp.status_code == 403

        resp = await client.get(
            "/api/v1/orgs/current", params={"orgId": mine}, headers=bearer(alice, theirs)
        )
        assert resp.status_code == 200
        assert resp.json()["id"] == mine


class TestMembers:
    async def test_add_and_list(self, client):
        _, owner = await sign_up(client, "ada@acme.com", name="Ada")
        _, member = await sign_up(client, "bob@acme.com", name="Bob")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "member")

        resp = await client.get("/api/v1/members", headers=bearer(member, org_id))
        assert resp.status_code == 200
        roles = {m["email"]: m["role"] for m in resp.json()["data"]}
        assert roles == {"ada@acme.com": "owner", "bob@acme.com": "member"}

    async def test_add_unknown_user(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, owner, "acme")
        resp = await client.post(
            "/api/v1/members",
            json={"email": "ghost@acme.com", "role": "member"},
            headers=bearer(owner, org_id),
        )
        assert resp.status_code == 404

    async def test_add_twice(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        await sign_up(client, "bob@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "member")
        resp = await client.post(
            "/api/v1/members",
            json={"email": "bob@acme.com", "role": "admin"},
            headers=bearer(owner, org_id),
        )
        assert resp.status_code == 409

    async def test_member_cannot_add(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        _, member = await sign_up(client, "bob@acme.com")
        await sign_up(client, "cat@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "member")

        resp = await client.post(
            "/api/v1/members",
            json={"email": "cat@acme.com", "role": "member"},
            headers=bearer(member, org_id),
        )
        assert resp.status_code == 403

    async def test_admin_cannot_grant_owner(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        _, admin = await sign_up(client, "bob@acme.com")
        await sign_up(client, "cat@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "admin")

        resp = await client.post(
            "/api/v1/members",
            json={"email": "cat@acme.com", "role": "owner"},
            headers=bearer(admin, org_id),
        )
        assert resp.status_code == 403

    async def test_admin_cannot_demote_owner(self, client):
        owner_id, owner = await sign_up(client, "ada@acme.com")
        _, admin = await sign_up(client, "bob@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "admin")

        resp = await client.patch(
            f"/api/v1/members/{owner_id}", json={"role": "member"}, headers=bearer(admin, org_id)
        )
        assert resp.status_code == 403

    async def test_last_owner_cannot_be_demoted_or_removed(self, client):
        owner_id, owner = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, owner, "acme")

        resp = await client.patch(
            f"/api/v1/members/{owner_id}", json={"role": "admin"}, headers=bearer(owner, org_id)
        )
        assert resp.status_code == 409

        resp = await client.delete(f"/api/v1/members/{owner_id}", headers=bearer(owner, org_id))
        assert resp.status_code == 409

    async def test_role_change_takes_effect_immediately(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        bob_id, bob = await sign_up(client, "bob@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "member")

        resp = await client.post(
            "/api/v1/tools", json={"name": "Search", "type": "http"}, headers=bearer(bob, org_id)
        )
        assert resp.status_code == 403

        resp = await client.patch(
            f"/api/v1/members/{bob_id}", json={"role": "admin"}, headers=bearer(owner, org_id)
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"

        resp = await client.post(
            "/api/v1/tools", json={"name": "Search", "type": "http"}, headers=bearer(bob, org_id)
        )
        assert resp.status_code == 201

    async def test_removed_member_loses_access(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        bob_id, bob = await sign_up(client, "bob@acme.com")
        org_id = await create_org(client, owner, "acme")
        await add_member(client, owner, org_id, "bob@acme.com", "member")
        assert (await client.get("/api/v1/orgs/current", headers=bearer(bob, org_id))).status_code == 200

        resp = await client.delete(f"/api/v1/members/{bob_id}", headers=bearer(owner, org_id))
        assert resp.status_code == 204

        resp = await client.get("/api/v1/orgs/current", headers=bearer(bob, org_id))
        assert resp.status_code == 403

    async def test_remove_unknown_member(self, client):
        _, owner = await sign_up(client, "ada@acme.com")
        org_id = await create_org(client, owner, "acme")
        resp = await client.delete("/api/v1/members/nobody", headers=bearer(owner, org_id))
        assert resp.status_code == 404
