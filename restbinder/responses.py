"""Selection of the response status code for handler output."""

import logging
from http import HTTPStatus
from typing import Any, Optional

from .endpoints import Endpoint
from .registry import TypeRegistry
from .types import NULL_TYPE, runtime_type_tag

logger = logging.getLogger(__name__)


def status_for(endpoint: Endpoint, response_data: Any, registry: Optional[TypeRegistry] = None) -> int:
    """Find the status code declared for the runtime type of the response data.

    Outputs are scanned in declared order and the first one whose type hint
    contains the data's type wins. Defaults to 200 OK.
    """
    tag = runtime_type_tag(response_data, registry)

    for output in endpoint.outputs:
        for type_ in output.type_hint.types:
            if (type_.type or NULL_TYPE) == tag:
                logger.debug(f"Response type {tag} of {endpoint.method} maps to {output.status_code}")
                return output.status_code

    return HTTPStatus.OK.value
