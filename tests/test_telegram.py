import json
from urllib.parse import urlencode

from app.util.telegram import extract_user_id, sign_init_data, verify_init_data

TOKEN = "123456:TEST-TOKEN"


def init_data(user_id=777, token=TOKEN, **extra):
  fields = {"auth_date": "1700000000", "query_id": "AAE", "user": json.dumps({"id": user_id, "first_name": "Ann"})}
  fields.update(extra)
  return urlencode(sign_init_data(fields, token))


def test_valid_init_data():
  data = init_data()
  assert verify_init_data(data, TOKEN) == {"ok": True, "reason": None}
  assert extract_user_id(data) == 777


def test_missing_pieces():
  assert verify_init_data(None, TOKEN)["reason"] == "missing_init_data"
  assert verify_init_data("", TOKEN)["reason"] == "missing_init_data"
  assert verify_init_data(init_data(), "")["reason"] == "missing_bot_token"
  assert verify_init_data("auth_date=1", TOKEN)["reason"] == "missing_hash"


def test_wrong_token_or_tampering_fails():
  assert verify_init_data(init_data(), "other:token")["reason"] == "bad_hash"
  tampered = init_data().replace("auth_date=1700000000", "auth_date=1700000001")
  assert verify_init_data(tampered, TOKEN)["reason"] == "bad_hash"


def test_user_id_must_be_integer():
  fields = {"auth_date": "1", "user": json.dumps({"id": "777"})}
  assert extract_user_id(urlencode(fields)) is None
  assert extract_user_id("user=not-json") is None
  assert extract_user_id("auth_date=1") is None
