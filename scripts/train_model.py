# C:\dev\maxent_tagger\scripts\train_model.py

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from maxent.classifier import Classifier
from maxent.config import Config, load_config
from maxent.corpus import Corpus
from maxent.data_validation import validate_sample
from maxent.evaluation import evaluate
from maxent.features import FeatureSet
from maxent.lexicon import LexiconTagger


def resolve_output(cfg: Config, config_path: str, key: str, override: Optional[str]) -> Path:
    """Returns the CLI override, or the config path resolved next to the config file."""
    if override:
        return Path(override)
    return Path(config_path).parent / cfg.paths[key]


def main():
    """
    Main entry point for the command-line model training script.

    This script orchestrates the entire model training process, which includes:
    1.  Loading the configuration and the Brown-format corpus.
    2.  Splitting the corpus into a train and a test part.
    3.  Generating the training sample from the train part and saving it.
    4.  Generating the feature set from the sample and training the
        maximum-entropy classifier with iterative scaling.
    5.  Saving the classifier and the lexicon built from the train part.
    6.  Comparing the classifier against the lexicon baseline on the test part.
    """
    parser = argparse.ArgumentParser(
        description="Train a maximum-entropy part-of-speech classifier from a Brown-format corpus.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--corpus", type=str, required=True, help="Path to the Brown-format corpus file.")
    parser.add_argument("--config", default="config.yaml", help="Path to the configuration YAML file.")
    parser.add_argument("--sample", type=str, help="Output path for the sample JSON (defaults to paths.sample).")
    parser.add_argument("--classifier", type=str, help="Output path for the classifier JSON (defaults to paths.classifier).")
    parser.add_argument("--lexicon", type=str, help="Output path for the lexicon JSON (defaults to paths.lexicon).")
    parser.add_argument("--iterations", type=int, help="Override training.max_iterations.")
    parser.add_argument("--min-improvement", type=float, help="Override training.min_improvement.")
    parser.add_argument("--workers", type=int, help="Override training.workers.")
    args = parser.parse_args()

    try:
        cfg = load_config(args.config)
        corpus = Corpus.load(args.corpus)
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

    max_iterations = args.iterations if args.iterations is not None else cfg.max_iterations
    min_improvement = args.min_improvement if args.min_improvement is not None else cfg.min_improvement
    workers = args.workers if args.workers is not None else cfg.workers

    print(f"Loaded {len(corpus)} sentences ({corpus.word_count()} words) from {args.corpus}.")
    train_corpus, test_corpus = corpus.split_in_train_and_test(cfg.train_percentage, seed=cfg.split_seed)
    print(f"Split into {len(train_corpus)} training and {len(test_corpus)} test sentences.")

    print("\n--- Generating Sample ---")
    sample = train_corpus.generate_sample(cfg.word_offsets, cfg.tag_offsets, progress=True)
    if sample.size() == 0:
        print("\n[ERROR] The training part of the corpus is empty. Aborting.")
        sys.exit(1)
    report = validate_sample(sample)
    if report["issue_count"]:
        print(f"Warning: sample validation reported {report['issue_count']} issues.")

    sample_path = resolve_output(cfg, args.config, "sample", args.sample)
    outcome = sample.save(sample_path)
    if not outcome.ok:
        print(f"\n[ERROR] Could not save sample to {sample_path}: {outcome.error}", file=sys.stderr)
        sys.exit(1)
    print(f"Successfully saved {sample.size()} events to {sample_path}")

    print("\n--- Generating Features ---")
    feature_set = sample.generate_features(FeatureSet())
    print(f"Number of features: {feature_set.size()} over {len(feature_set.labels)} tags")

    print("\n--- Training Classifier ---")
    classifier = Classifier(feature_set, sample)
    training = classifier.train(max_iterations, min_improvement, workers=workers)
    status = "converged" if training.converged else "stopped at the iteration limit"
    print(
        f"Training {status} after {training.iterations} iterations "
        f"(log-likelihood {training.final_log_likelihood:.5f})."
    )
    print(f"Checksum: {classifier.check_sum()}")

    classifier_path = resolve_output(cfg, args.config, "classifier", args.classifier)
    outcome = classifier.save(classifier_path)
    if not outcome.ok:
        print(f"\n[ERROR] Could not save classifier to {classifier_path}: {outcome.error}", file=sys.stderr)
        sys.exit(1)
    print(f"Successfully saved classifier to {classifier_path}")

    lexicon = train_corpus.build_lexicon(cfg.default_category, cfg.default_category_capitalized)
    lexicon_path = resolve_output(cfg, args.config, "lexicon", args.lexicon)
    outcome = lexicon.save(lexicon_path)
    if not outcome.ok:
        print(f"\n[ERROR] Could not save lexicon to {lexicon_path}: {outcome.error}", file=sys.stderr)
        sys.exit(1)
    print(f"Successfully saved lexicon ({lexicon.size()} words) to {lexicon_path}")

    if len(test_corpus):
        print("\n--- Evaluating on Test Sentences ---")
        evaluation = evaluate(test_corpus, LexiconTagger(lexicon), classifier, cfg.word_offsets, cfg.tag_offsets)
        print(json.dumps(evaluation.summary(), indent=2))

    print("\nModel training complete.")


if __name__ == "__main__":
    main()
