"""Train the pricing tier classifier on the example people.

Trains on three hardcoded people (Erick, Ana, Carlos), one per tier, then
predicts the tier of a new person.

Example:
    $ python scripts/train_tiers.py
    $ python scripts/train_tiers.py --age 28 --color verde --location Curitiba
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.tiers.classifier import DEFAULT_EPOCHS, predict_tier, train_tier_classifier


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Train the pricing tier classifier and predict one person."
    )
    parser.add_argument("--name", type=str, default="José", help="Person name")
    parser.add_argument("--age", type=float, default=28, help="Person age")
    parser.add_argument("--color", type=str, default="verde", help="Favourite color")
    parser.add_argument("--location", type=str, default="Curitiba", help="Location")
    parser.add_argument(
        "--epochs",
        type=int,
        default=DEFAULT_EPOCHS,
        help=f"Training epochs (default: {DEFAULT_EPOCHS})",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        args = parse_arguments()
        model, context = train_tier_classifier(epochs=args.epochs)

        person = {
            "name": args.name,
            "age": args.age,
            "color": args.color,
            "location": args.location,
        }
        predict_tier(model, person, context)
        return 0

    except ValueError as e:
        logging.error(f"Validation error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Training interrupted by user")
        return 130
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
