from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the built-in resume templates.")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Replace existing built-in templates instead of skipping when any template exists.",
    )
    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(level="INFO", format="%(message)s")

    from resume_builder.db.store import init_db
    from resume_builder.services.template_service import seed_default_templates

    init_db()
    count = seed_default_templates(force=args.force)
    print(f"Seeded {count} template(s).")


if __name__ == "__main__":
    main()
