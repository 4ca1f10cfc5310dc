"""Sample requests against a storEDGE facility.

Run with a JSON config file holding the client settings plus a facility and
tenant to exercise::

    python -m storedge.samples config.json

The config path may also be given through ``STOREDGE_SAMPLES_CONFIG``.
"""

import os
import sys

import pydantic

from .config import ClientConfig, load_config
from .logs import configure_logging, get_logger
from .restapi import ApiResponse, StoredgeClient

CONFIG_ENV_VAR = "STOREDGE_SAMPLES_CONFIG"
logger = get_logger(__name__)

SIGN_UP_BODY = {
    "tenant": {
        "password": "supersecretpassword",
        "username": "awesome_o_5000",
    },
}

CHANGE_PASSWORD_BODY = {
    "tenant": {
        "current_password": "supersecretpassword",
        "new_password": "super_new_password",
    },
}


class SamplesConfig(ClientConfig):
    """Client settings plus the records the samples operate on."""

    facility_id: str = pydantic.Field(description="Facility UUID", min_length=1)
    tenant_id: str = pydantic.Field(description="Tenant UUID", min_length=1)


def run_samples(
    client: StoredgeClient,
    facility_id: str,
    tenant_id: str,
) -> dict[str, ApiResponse]:
    """Issue the sample requests and return the responses by name."""
    return {
        "units": client.get_units(facility_id),
        "available_units": client.get_available_units(facility_id),
        "sign_up_tenant": client.sign_up_tenant(facility_id, tenant_id, SIGN_UP_BODY),
        "change_tenant_password": client.change_tenant_password(
            facility_id,
            tenant_id,
            CHANGE_PASSWORD_BODY,
        ),
    }


def main(argv: list[str] | None = None) -> int:
    """Load config, run the samples and log each response status."""
    args = sys.argv[1:] if argv is None else argv
    config_path = args[0] if args else os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        msg = f"Usage: python -m storedge.samples CONFIG (or set {CONFIG_ENV_VAR})"
        raise SystemExit(msg)

    config = load_config(config_path, model=SamplesConfig)
    configure_logging(config.log_level)

    with StoredgeClient.from_config(config) as client:
        responses = run_samples(client, config.facility_id, config.tenant_id)

    for name, response in responses.items():
        logger.info("Sample request done", sample=name, status_code=response.status_code)
    logger.info("Done")
    return 0 if all(r.ok for r in responses.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
