"""Command-line interface for training the product affinity model.

This script trains the affinity network from a JSON product catalog and a
JSON list of users with purchase histories, then prints the top ranked
products for one user.

Example:
    Train with the bundled sample data:
        $ python scripts/train_model.py

    Train with custom parameters and rank products for a user:
        $ python scripts/train_model.py \\
            --catalog data/products.json \\
            --users data/users.json \\
            --epochs 50 \\
            --recommend-for Ana
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.infer import DEFAULT_TOP_N, recommend_products_for_user
from src.recommender.train import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_EPOCHS,
    DEFAULT_LEARNING_RATE,
    DEFAULT_RANDOM_STATE,
    TrainingConfig,
    train_from_records,
)
from src.recommender.utils import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_USERS_PATH,
    load_products_catalog,
    load_users,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise, use INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Train the product affinity model from JSON records.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Train with the bundled sample data
  python scripts/train_model.py

  # Shorter run, then rank products for Ana
  python scripts/train_model.py --epochs 20 --recommend-for Ana
        """,
    )

    parser.add_argument(
        "--catalog",
        type=str,
        default=DEFAULT_CATALOG_PATH,
        help=f"JSON product catalog (default: {DEFAULT_CATALOG_PATH})",
    )

    parser.add_argument(
        "--users",
        type=str,
        default=DEFAULT_USERS_PATH,
        help=f"JSON users with purchases (default: {DEFAULT_USERS_PATH})",
    )

    parser.add_argument(
        "--epochs",
        type=int,
        default=DEFAULT_EPOCHS,
        help=f"Training epochs (default: {DEFAULT_EPOCHS})",
    )

    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Batch size (default: {DEFAULT_BATCH_SIZE})",
    )

    parser.add_argument(
        "--learning-rate",
        type=float,
        default=DEFAULT_LEARNING_RATE,
        help=f"Adam learning rate (default: {DEFAULT_LEARNING_RATE})",
    )

    parser.add_argument(
        "--random-state",
        type=int,
        default=DEFAULT_RANDOM_STATE,
        help=f"Random seed for reproducibility (default: {DEFAULT_RANDOM_STATE})",
    )

    parser.add_argument(
        "--recommend-for",
        type=str,
        default=None,
        help="Name of a user to rank products for after training",
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"Number of products to print (default: {DEFAULT_TOP_N})",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args()


def main() -> int:
    """Main entry point for the training script.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    try:
        args = parse_arguments()

        setup_logging(verbose=args.verbose)
        logger = logging.getLogger(__name__)

        products = load_products_catalog(args.catalog)
        users = load_users(args.users)

        config = TrainingConfig(
            epochs=args.epochs,
            batch_size=args.batch_size,
            learning_rate=args.learning_rate,
            random_state=args.random_state,
        )

        def log_epoch(epoch: int, logs: dict) -> None:
            logger.info(
                f"Epoch {epoch} - Loss: {logs.get('loss', 0):.4f} "
                f"- Accuracy: {logs.get('accuracy', 0):.4f}"
            )

        model, context = train_from_records(products, users, config, log_epoch)

        logger.info("=" * 70)
        logger.info("Training Summary")
        logger.info("=" * 70)
        logger.info(f"Products:        {len(context.products)}")
        logger.info(f"Users:           {len(context.users)}")
        logger.info(f"Categories:      {context.num_categories}")
        logger.info(f"Colors:          {context.num_colors}")
        logger.info(f"Feature width:   {context.dimensions}")
        logger.info("=" * 70)

        if args.recommend_for:
            matches = [user for user in users if user.name == args.recommend_for]
            if not matches:
                raise ValueError(f"User not found: {args.recommend_for}")

            recommendations = recommend_products_for_user(
                matches[0], context, model, top_n=args.top_n
            )
            logger.info(f"Top {len(recommendations)} products for {args.recommend_for}:")
            for rank, item in enumerate(recommendations, start=1):
                logger.info(f"  {rank:2d}. {item['name']:<25} score={item['score']:.4f}")

        return 0

    except FileNotFoundError as e:
        logging.error(f"File error: {e}")
        return 1
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
