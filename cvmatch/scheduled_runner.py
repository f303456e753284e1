"""Background job entrypoint for scheduled execution.

This module catches up on work the interactive paths left behind:

1. REPARSE: Extract and cache CV text for applications that have none
2. ANALYZE: Score every pending application that has no stored result,
   using its job's shortlist criteria (or the defaults)

Results are stored on the application rows and can be viewed via:
- CLI: `cvmatch candidate <application-id>` or `cvmatch search`
- Direct DB query: SELECT id, score FROM applications ORDER BY score DESC
"""

import logging
import sys
import time

from cvmatch.config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Main scheduled job execution.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    start_time = time.time()
    logger.info("Starting cvmatch scheduled runner")

    try:
        from cvmatch.db.connection import init_tables

        logger.info("Initializing database tables")
        init_tables()

        from cvmatch.services.match_service import analyze_pending_applications, reparse_missing_cvs

        logger.info("Step 1/2: Reparsing applications without CV text")
        reparse_stats = reparse_missing_cvs()
        logger.info(f"Reparse complete: {reparse_stats}")

        logger.info("Step 2/2: Analyzing pending applications")
        analyze_stats = analyze_pending_applications()
        logger.info(f"Analysis complete: {analyze_stats}")

        elapsed = time.time() - start_time
        logger.info(f"Scheduled runner completed successfully in {elapsed:.2f}s")
        return 0

    except Exception as e:
        logger.exception(f"Scheduled runner failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
