"""
Wire types for the Transmission RPC protocol.

Every call is a JSON envelope POSTed to a single endpoint:

    request:  {"method": "<method>", "arguments": {...}}
    response: {"result": "success" | "<error>", "arguments": {...}}

The shape of the response ``arguments`` is not tagged in the payload; it is fixed by
the method that was sent. RpcResponse is therefore generic over the argument shape,
and METHOD_RESPONSE_TYPES records which shape each known method returns.
"""

from enum import Enum, IntEnum
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

from .errors import RpcResultError


SUCCESS = "success"


class TorrentGetField(str, Enum):
    """Torrent fields that can be requested with torrent-get."""
    ACTIVITY_DATE = "activityDate"
    ADDED_DATE = "addedDate"
    DONE_DATE = "doneDate"
    DOWNLOAD_DIR = "downloadDir"
    ERROR = "error"
    ERROR_STRING = "errorString"
    ETA = "eta"
    HASH_STRING = "hashString"
    ID = "id"
    IS_FINISHED = "isFinished"
    IS_STALLED = "isStalled"
    LEFT_UNTIL_DONE = "leftUntilDone"
    METADATA_PERCENT_COMPLETE = "metadataPercentComplete"
    NAME = "name"
    PEERS_CONNECTED = "peersConnected"
    PEERS_GETTING_FROM_US = "peersGettingFromUs"
    PEERS_SENDING_TO_US = "peersSendingToUs"
    PERCENT_DONE = "percentDone"
    QUEUE_POSITION = "queuePosition"
    RATE_DOWNLOAD = "rateDownload"
    RATE_UPLOAD = "rateUpload"
    RECHECK_PROGRESS = "recheckProgress"
    SEED_RATIO_LIMIT = "seedRatioLimit"
    SEED_RATIO_MODE = "seedRatioMode"
    SIZE_WHEN_DONE = "sizeWhenDone"
    STATUS = "status"
    TOTAL_SIZE = "totalSize"
    TRACKERS = "trackers"
    UPLOAD_RATIO = "uploadRatio"
    UPLOADED_EVER = "uploadedEver"
    WEBSEEDS_SENDING_TO_US = "webseedsSendingToUs"


class TorrentAction(str, Enum):
    """Action verbs that take a list of torrent ids. The value is the RPC method name."""
    START = "torrent-start"
    START_NOW = "torrent-start-now"
    STOP = "torrent-stop"
    VERIFY = "torrent-verify"
    REANNOUNCE = "torrent-reannounce"
    REMOVE = "torrent-remove"


class TorrentStatus(IntEnum):
    STOPPED = 0
    CHECK_WAIT = 1
    CHECK = 2
    DOWNLOAD_WAIT = 3
    DOWNLOAD = 4
    SEED_WAIT = 5
    SEED = 6


# -------------------------------------------------------------------------
# Request envelope
# -------------------------------------------------------------------------

class RequestArguments(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class NoArguments(RequestArguments):
    """Arguments of a method that takes none, such as session-get."""
    pass


class TorrentGetArguments(RequestArguments):
    fields: List[TorrentGetField]


class TorrentActionArguments(RequestArguments):
    ids: List[StrictInt]


MethodArguments = Union[NoArguments, TorrentGetArguments, TorrentActionArguments]

METHOD_ARGUMENT_TYPES: Dict[str, Type[RequestArguments]] = {
    "session-get": NoArguments,
    "torrent-get": TorrentGetArguments,
    **{action.value: TorrentActionArguments for action in TorrentAction},
}


class RpcRequest(BaseModel):
    """A single RPC call. Build one per call with the constructors below."""

    model_config = ConfigDict(frozen=True)

    method: str
    arguments: MethodArguments

    @model_validator(mode="after")
    def _check_arguments(self) -> "RpcRequest":
        expected = METHOD_ARGUMENT_TYPES.get(self.method)
        if expected is not None and not isinstance(self.arguments, expected):
            raise ValueError(
                f"{self.method} takes {expected.__name__}, got {type(self.arguments).__name__}"
            )
        return self

    @classmethod
    def session_get(cls) -> "RpcRequest":
        return cls(method="session-get", arguments=NoArguments())

    @classmethod
    def torrent_get(cls, fields: Sequence[TorrentGetField]) -> "RpcRequest":
        return cls(method="torrent-get", arguments=TorrentGetArguments(fields=list(fields)))

    @classmethod
    def torrent_action(cls, action: TorrentAction, ids: Sequence[int]) -> "RpcRequest":
        return cls(method=TorrentAction(action).value, arguments=TorrentActionArguments(ids=list(ids)))

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# -------------------------------------------------------------------------
# Response argument shapes
# -------------------------------------------------------------------------

class RpcResponseArgument(BaseModel):
    """Marker base class for every legal response ``arguments`` shape."""

    model_config = ConfigDict(populate_by_name=True)


class Nothing(RpcResponseArgument):
    """Success payload of a method that returns no data."""
    pass


class SessionGet(RpcResponseArgument):
    """Daemon settings returned by session-get. Keys not modelled here are kept as extras."""

    model_config = ConfigDict(extra="allow")

    alt_speed_enabled: Optional[bool] = Field(None, alias="alt-speed-enabled")
    blocklist_enabled: Optional[bool] = Field(None, alias="blocklist-enabled")
    config_dir: Optional[str] = Field(None, alias="config-dir")
    download_dir: Optional[str] = Field(None, alias="download-dir")
    encryption: Optional[str] = None
    incomplete_dir: Optional[str] = Field(None, alias="incomplete-dir")
    peer_port: Optional[int] = Field(None, alias="peer-port")
    rpc_version: Optional[int] = Field(None, alias="rpc-version")
    rpc_version_minimum: Optional[int] = Field(None, alias="rpc-version-minimum")
    session_id: Optional[str] = Field(None, alias="session-id")
    version: Optional[str] = None


class Tracker(BaseModel):
    id: Optional[int] = None
    announce: Optional[str] = None
    scrape: Optional[str] = None
    tier: Optional[int] = None


class Torrent(BaseModel):
    """A torrent record. Only the fields requested with torrent-get are populated."""

    model_config = ConfigDict(populate_by_name=True)

    activity_date: Optional[int] = Field(None, alias="activityDate")
    added_date: Optional[int] = Field(None, alias="addedDate")
    done_date: Optional[int] = Field(None, alias="doneDate")
    download_dir: Optional[str] = Field(None, alias="downloadDir")
    error: Optional[int] = None
    error_string: Optional[str] = Field(None, alias="errorString")
    eta: Optional[int] = None
    hash_string: Optional[str] = Field(None, alias="hashString")
    id: Optional[int] = None
    is_finished: Optional[bool] = Field(None, alias="isFinished")
    is_stalled: Optional[bool] = Field(None, alias="isStalled")
    left_until_done: Optional[int] = Field(None, alias="leftUntilDone")
    metadata_percent_complete: Optional[float] = Field(None, alias="metadataPercentComplete")
    name: Optional[str] = None
    peers_connected: Optional[int] = Field(None, alias="peersConnected")
    peers_getting_from_us: Optional[int] = Field(None, alias="peersGettingFromUs")
    peers_sending_to_us: Optional[int] = Field(None, alias="peersSendingToUs")
    percent_done: Optional[float] = Field(None, alias="percentDone")
    queue_position: Optional[int] = Field(None, alias="queuePosition")
    rate_download: Optional[int] = Field(None, alias="rateDownload")
    rate_upload: Optional[int] = Field(None, alias="rateUpload")
    recheck_progress: Optional[float] = Field(None, alias="recheckProgress")
    seed_ratio_limit: Optional[float] = Field(None, alias="seedRatioLimit")
    seed_ratio_mode: Optional[int] = Field(None, alias="seedRatioMode")
    size_when_done: Optional[int] = Field(None, alias="sizeWhenDone")
    status: Optional[TorrentStatus] = None
    total_size: Optional[int] = Field(None, alias="totalSize")
    trackers: Optional[List[Tracker]] = None
    upload_ratio: Optional[float] = Field(None, alias="uploadRatio")
    uploaded_ever: Optional[int] = Field(None, alias="uploadedEver")
    webseeds_sending_to_us: Optional[int] = Field(None, alias="webseedsSendingToUs")


TorrentT = TypeVar("TorrentT", bound=Torrent)


class Torrents(RpcResponseArgument, Generic[TorrentT]):
    torrents: List[TorrentT]


METHOD_RESPONSE_TYPES: Dict[str, Type[RpcResponseArgument]] = {
    "session-get": SessionGet,
    "torrent-get": Torrents,
    **{action.value: Nothing for action in TorrentAction},
}


def _generic_metadata(shape: type) -> Dict[str, Any]:
    return getattr(shape, "__pydantic_generic_metadata__", None) or {}


def _generic_origin(shape: type) -> type:
    return _generic_metadata(shape).get("origin") or shape


def _check_type_arguments(shape: type) -> None:
    metadata = _generic_metadata(shape)
    if metadata.get("parameters"):
        raise TypeError(f"{shape.__name__} needs a concrete type argument, e.g. Torrents[Torrent]")

    origin = metadata.get("origin")
    if origin is None:
        return
    parameters = _generic_metadata(origin).get("parameters", ())
    for parameter, argument in zip(parameters, metadata.get("args", ())):
        bound = getattr(parameter, "__bound__", None)
        if bound is not None and not (isinstance(argument, type) and issubclass(argument, bound)):
            raise TypeError(f"{shape.__name__}: {argument!r} is not a {bound.__name__}")


def check_response_type(method: str, response_type: Any) -> None:
    """
    Verify that ``response_type`` may be used to decode the response to ``method``.

    Raises:
        TypeError: If the type is not an RpcResponseArgument, is a generic shape without
            a fitting type argument, or does not match the shape registered for a
            known method
    """
    if not isinstance(response_type, type) or not issubclass(response_type, RpcResponseArgument):
        raise TypeError(f"{response_type!r} is not an RpcResponseArgument type")
    _check_type_arguments(response_type)

    expected = METHOD_RESPONSE_TYPES.get(method)
    if expected is not None and not issubclass(_generic_origin(response_type), expected):
        raise TypeError(
            f"{method} responds with {expected.__name__}, not {response_type.__name__}"
        )


# -------------------------------------------------------------------------
# Response envelope
# -------------------------------------------------------------------------

ArgumentT = TypeVar("ArgumentT", bound=RpcResponseArgument)


class RpcResponse(BaseModel, Generic[ArgumentT]):
    """
    Decoded response envelope.

    ``arguments`` is only populated when ``result`` is "success"; for any other result
    the payload is discarded and ``arguments`` is None.
    """

    result: str
    arguments: Optional[ArgumentT] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_failed_arguments(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("result") != SUCCESS:
            data = {**data, "arguments": None}
        return data

    @model_validator(mode="after")
    def _require_arguments(self) -> "RpcResponse":
        if self.result == SUCCESS and self.arguments is None:
            raise ValueError("successful response has no arguments")
        return self

    @property
    def is_success(self) -> bool:
        return self.result == SUCCESS

    def raise_for_result(self) -> "RpcResponse":
        """Raise RpcResultError unless the call succeeded; returns self otherwise."""
        if not self.is_success:
            raise RpcResultError(self.result)
        return self
