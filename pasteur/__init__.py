from pasteur._coordinator import ResponseCoordinator as ResponseCoordinator
from pasteur._core._aggregate import (
    EntityList as EntityList,
    aggregate as aggregate,
    aggregate_key as aggregate_key,
    aggregate_last_modified as aggregate_last_modified,
    collect_metadata as collect_metadata,
    describe_entity as describe_entity,
)
from pasteur._core._headers import Headers as Headers, parse_entity_tags as parse_entity_tags
from pasteur._core._spec import (
    NegotiationOptions as NegotiationOptions,
    evaluate as evaluate,
    fresh_by_etag as fresh_by_etag,
    fresh_by_time as fresh_by_time,
)
from pasteur._core.models import (
    Cacheable as Cacheable,
    CacheMetadata as CacheMetadata,
    ConditionalRequest as ConditionalRequest,
    Fresh as Fresh,
    Response as Response,
    ResponseMetadata as ResponseMetadata,
    Stale as Stale,
    Verdict as Verdict,
)
from pasteur._exceptions import MalformedTimestamp as MalformedTimestamp, PasteurError as PasteurError
from pasteur._keygen import (
    EtagGenerator as EtagGenerator,
    HashEtagGenerator as HashEtagGenerator,
    md5_etag as md5_etag,
)
from pasteur._serializers import JSON_MIME_TYPE as JSON_MIME_TYPE, json_serializer as json_serializer

__all__ = (
    ## Aggregation
    "EntityList",
    "aggregate",
    "aggregate_key",
    "aggregate_last_modified",
    "collect_metadata",
    "describe_entity",
    ## Freshness
    "NegotiationOptions",
    "evaluate",
    "fresh_by_etag",
    "fresh_by_time",
    ## Models
    "Cacheable",
    "CacheMetadata",
    "ConditionalRequest",
    "Fresh",
    "Stale",
    "Verdict",
    "Response",
    "ResponseMetadata",
    ## Headers
    "Headers",
    "parse_entity_tags",
    ## ETags
    "EtagGenerator",
    "HashEtagGenerator",
    "md5_etag",
    ## Serialization
    "JSON_MIME_TYPE",
    "json_serializer",
    # Coordinator
    "ResponseCoordinator",
    # Errors
    "PasteurError",
    "MalformedTimestamp",
)
