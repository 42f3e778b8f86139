"""Main entry point for Disaster Info."""

import asyncio
import sys

from loguru import logger

USAGE = "Usage: python main.py [api | info LAT LON [--json] [--address TEXT]]"


def main():
    """Run the application."""
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    from disaster_info.utils.logger import setup_logging
    setup_logging()

    cmd = sys.argv[1]

    if cmd == "api":
        import uvicorn
        from disaster_info.utils.config import settings
        logger.info("Starting API server...")
        uvicorn.run(
            "disaster_info.api.main:app",
            host=settings.api.host,
            port=settings.api.port,
            reload=settings.api.reload,
        )

    elif cmd == "info":
        if len(sys.argv) < 4:
            print(USAGE)
            sys.exit(1)

        from disaster_info.core import DisasterInfoError, coordinate_parser, format_output
        from disaster_info.core.service import DisasterInfoService
        from disaster_info.core.models import CoordinateSource

        options = sys.argv[4:]
        style = "json" if "--json" in options else "text"
        address = None
        if "--address" in options:
            i = options.index("--address")
            address = " ".join(options[i + 1:i + 2])

        try:
            coordinates = coordinate_parser.parse(
                sys.argv[2],
                sys.argv[3],
                source=CoordinateSource.ADDRESS if address else CoordinateSource.COORDINATES,
                address=address,
            )
            info = asyncio.run(DisasterInfoService().get_disaster_info(coordinates))
        except DisasterInfoError as e:
            logger.error(f"Lookup failed: {e.message}")
            sys.exit(2)
        print(format_output(info, style))

    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)


if __name__ == "__main__":
    main()
