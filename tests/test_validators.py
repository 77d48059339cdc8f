from euclid_mcp.tools import validators


def test_token_metadata_params_all_optional():
    assert validators.validate_token_metadata_params() is None
    assert validators.validate_token_metadata_params(limit=0, offset=10, search="st", token_id="stars") is None


def test_token_metadata_rejects_bad_pagination():
    assert validators.validate_token_metadata_params(limit=-1) == "limit must be a non-negative integer"
    assert validators.validate_token_metadata_params(limit="abc") == "limit must be a non-negative integer"
    assert validators.validate_token_metadata_params(limit=True) == "limit must be a non-negative integer"
    assert validators.validate_token_metadata_params(offset=1.5) == "offset must be a non-negative integer"


def test_token_metadata_rejects_non_string_fields():
    assert validators.validate_token_metadata_params(token_id=12) == "tokenId must be a string"
    assert validators.validate_token_metadata_params(search=["a"]) == "search must be a string"


def test_routes_params_required():
    assert validators.validate_routes_params("stars", "usdc", "1000000") is None
    assert validators.validate_routes_params(None, "usdc", "1") == "token_in is required and must be a string"
    assert validators.validate_routes_params("stars", "", "1") == "token_out is required and must be a string"
    assert validators.validate_routes_params("stars", "usdc", 1000) == "amount_in is required and must be a string"
