#!/usr/bin/env python3
"""Run script for the StashDog gateway."""

import logging

import uvicorn

from stashdog_gateway import config

if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "stashdog_gateway.api.app:app",
        host=config.HOST,
        port=config.PORT,
        reload=True
    )
