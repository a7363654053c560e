from datetime import timedelta
from uuid import uuid4

import jwt
import pytest
from fastapi import HTTPException

from src.auth.dependencies import decode_access_token
from src.auth.tests.helpers import make_access_token
from src.config.settings import settings
from src.rsvps.urls import ADMIN_LIST_RSVPS_URL


def test_decode_access_token():
    couple_id = uuid4()

    assert decode_access_token(make_access_token(couple_id)) == couple_id


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        make_access_token(uuid4(), expires_in=timedelta(minutes=-5)),
        jwt.encode({"sub": str(uuid4())}, "some-other-secret", algorithm=settings.algorithm),
        jwt.encode({"name": "no subject"}, settings.secret_key, algorithm=settings.algorithm),
        make_access_token("not-a-uuid"),
    ],
)
def test_decode_access_token_rejects(token):
    with pytest.raises(HTTPException) as exc_info:
        decode_access_token(token)

    assert exc_info.value.status_code == 401


async def test_admin_route_authentication(client, bride, auth_headers):
    missing = await client.get(ADMIN_LIST_RSVPS_URL)
    unknown_couple = await client.get(
        ADMIN_LIST_RSVPS_URL, headers={"Authorization": f"Bearer {make_access_token(uuid4())}"}
    )
    ok = await client.get(ADMIN_LIST_RSVPS_URL, headers=auth_headers(bride))

    assert missing.status_code == 401
    assert unknown_couple.status_code == 401
    assert ok.status_code == 200
    assert ok.json() == []
