"""
Tests for the request/response envelope models and protocol enumerations.
"""

import json
import re

import pytest
from pydantic import ValidationError

from transrpc.errors import RpcResultError
from transrpc.types import (
    METHOD_RESPONSE_TYPES,
    NoArguments,
    Nothing,
    RpcRequest,
    RpcResponse,
    SessionGet,
    Torrent,
    TorrentAction,
    TorrentActionArguments,
    TorrentGetArguments,
    TorrentGetField,
    Torrents,
    TorrentStatus,
    Tracker,
    check_response_type,
)


class TestRpcRequest:
    def test_session_get_body(self):
        assert RpcRequest.session_get().to_json() == '{"method":"session-get","arguments":{}}'

    def test_torrent_get_body(self):
        request = RpcRequest.torrent_get([TorrentGetField.ID, TorrentGetField.NAME])
        assert request.to_json() == '{"method":"torrent-get","arguments":{"fields":["id","name"]}}'

    def test_torrent_action_body(self):
        request = RpcRequest.torrent_action(TorrentAction.START, [1, 2, 3])
        assert request.to_json() == '{"method":"torrent-start","arguments":{"ids":[1,2,3]}}'

    @pytest.mark.parametrize("request_", [
        RpcRequest.session_get(),
        RpcRequest.torrent_get([TorrentGetField.HASH_STRING, TorrentGetField.PERCENT_DONE]),
        RpcRequest.torrent_action(TorrentAction.VERIFY, [7]),
    ])
    def test_request_survives_json(self, request_):
        decoded = RpcRequest.model_validate_json(request_.to_json())
        assert decoded.method == request_.method
        assert decoded.arguments == request_.arguments
        assert type(decoded.arguments) is type(request_.arguments)

    def test_decoded_arguments_pick_the_matching_shape(self):
        decoded = RpcRequest.model_validate_json('{"method":"torrent-stop","arguments":{"ids":[4]}}')
        assert isinstance(decoded.arguments, TorrentActionArguments)
        assert decoded.arguments.ids == [4]

    def test_method_argument_mismatch_rejected(self):
        with pytest.raises(ValidationError):
            RpcRequest(method="session-get", arguments=TorrentActionArguments(ids=[1]))
        with pytest.raises(ValidationError):
            RpcRequest(method="torrent-start", arguments=TorrentGetArguments(fields=[TorrentGetField.ID]))

    @pytest.mark.parametrize("ids", [[True], ["2"], [3.0], [1, "2"]])
    def test_non_integer_ids_rejected(self, ids):
        with pytest.raises(ValidationError):
            RpcRequest.torrent_action(TorrentAction.START, ids)

    def test_unknown_field_name_rejected(self):
        with pytest.raises(ValidationError):
            TorrentGetArguments(fields=["not-a-field"])

    def test_unknown_method_allowed(self):
        request = RpcRequest(method="session-stats", arguments=NoArguments())
        assert json.loads(request.to_json()) == {"method": "session-stats", "arguments": {}}

    def test_request_is_immutable(self):
        request = RpcRequest.session_get()
        with pytest.raises(ValidationError):
            request.method = "torrent-get"


class TestEnumerations:
    def test_field_names_are_unique_and_reversible(self):
        values = [field.value for field in TorrentGetField]
        assert len(set(values)) == len(values)
        for field in TorrentGetField:
            assert TorrentGetField(field.value) is field
            assert json.loads(TorrentGetArguments(fields=[field]).model_dump_json()) == {"fields": [field.value]}

    def test_actions_are_lowercase_hyphenated_methods(self):
        values = [action.value for action in TorrentAction]
        assert len(set(values)) == len(values)
        for action in TorrentAction:
            assert re.fullmatch(r"torrent(-[a-z]+)+", action.value), action.value
            assert TorrentAction(action.value) is action

    def test_every_action_pairs_with_nothing(self):
        for action in TorrentAction:
            assert METHOD_RESPONSE_TYPES[action.value] is Nothing


class TestRpcResponse:
    def test_torrents_decode(self):
        response = RpcResponse[Torrents[Torrent]].model_validate({
            "result": "success",
            "arguments": {"torrents": [
                {"id": 1, "name": "x", "percentDone": 0.5, "status": 4, "hashString": "ab" * 20},
            ]},
        })
        assert response.is_success
        torrent = response.arguments.torrents[0]
        assert torrent.id == 1
        assert torrent.name == "x"
        assert torrent.percent_done == 0.5
        assert torrent.status is TorrentStatus.DOWNLOAD
        assert torrent.hash_string == "ab" * 20
        assert torrent.total_size is None

    def test_empty_success_payload(self):
        response = RpcResponse[Nothing].model_validate_json('{"result":"success","arguments":{}}')
        assert response.is_success
        assert isinstance(response.arguments, Nothing)

    def test_success_requires_arguments(self):
        with pytest.raises(ValidationError):
            RpcResponse[Nothing].model_validate({"result": "success"})

    def test_failed_result_discards_arguments(self):
        response = RpcResponse[Torrents[Torrent]].model_validate({
            "result": "no such torrent",
            "arguments": {"torrents": "garbage"},
        })
        assert not response.is_success
        assert response.arguments is None
        with pytest.raises(RpcResultError) as exc_info:
            response.raise_for_result()
        assert exc_info.value.result == "no such torrent"

    def test_raise_for_result_returns_self_on_success(self):
        response = RpcResponse[Nothing].model_validate({"result": "success", "arguments": {}})
        assert response.raise_for_result() is response

    def test_session_settings_keep_unknown_keys(self):
        settings = SessionGet.model_validate({
            "rpc-version": 17,
            "version": "4.0.5",
            "download-dir": "/downloads",
            "speed-limit-up": 100,
        })
        assert settings.rpc_version == 17
        assert settings.version == "4.0.5"
        assert settings.download_dir == "/downloads"
        assert settings.model_extra["speed-limit-up"] == 100


class TestCheckResponseType:
    def test_matching_shapes_pass(self):
        check_response_type("session-get", SessionGet)
        check_response_type("torrent-get", Torrents[Torrent])
        check_response_type("torrent-start", Nothing)
        check_response_type("session-stats", Nothing)

    def test_wrong_shape_for_known_method(self):
        with pytest.raises(TypeError):
            check_response_type("torrent-get", SessionGet)
        with pytest.raises(TypeError):
            check_response_type("session-get", Nothing)

    def test_non_argument_type(self):
        with pytest.raises(TypeError):
            check_response_type("session-get", dict)
        with pytest.raises(TypeError):
            check_response_type("session-get", Torrent)

    def test_generic_shape_without_type_argument(self):
        with pytest.raises(TypeError):
            check_response_type("torrent-get", Torrents)

    def test_generic_shape_with_wrong_record_type(self):
        with pytest.raises(TypeError):
            check_response_type("torrent-get", Torrents[Tracker])
