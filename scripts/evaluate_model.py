# C:\dev\maxent_tagger\scripts\evaluate_model.py
"""Command-line script for evaluating a trained classifier.

This script tags every sentence of a Brown-format reference corpus with a
saved classifier and lexicon and compares the result with the gold tags. It
reports the accuracy of the lexicon baseline next to the accuracy of the
maximum-entropy tagger, and how often the classifier had to fall back to the
lexicon's default tag. A CSV of every disagreement can be written for error
analysis.
"""
import argparse
import json
import sys
from pathlib import Path

# Add project root to path to allow for package imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from maxent.classifier import Classifier
from maxent.config import Config, load_config
from maxent.corpus import Corpus
from maxent.evaluation import evaluate
from maxent.lexicon import Lexicon, LexiconTagger


def main():
    """
    Main entry point for the command-line model evaluation script.

    The classifier and lexicon must come from the same training run, and the
    context windows in the configuration must match the ones used to generate
    the training sample.
    """
    parser = argparse.ArgumentParser(
        description="Evaluate a maximum-entropy tagger against a tagged reference corpus.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--corpus", required=True, help="Path to the Brown-format reference corpus.")
    parser.add_argument("--classifier", required=True, help="Path to the saved classifier JSON file.")
    parser.add_argument("--lexicon", required=True, help="Path to the saved lexicon JSON file.")
    parser.add_argument("--config", help="Optional: configuration YAML file with the context windows.")
    parser.add_argument("--disagreements-out", help="Optional: Path to write a detailed disagreements CSV file.")
    args = parser.parse_args()

    try:
        cfg = load_config(args.config) if args.config else Config()

        print("Loading files...")
        corpus = Corpus.load(args.corpus)
        classifier = Classifier.load(args.classifier).unwrap()
        lexicon = Lexicon.load(args.lexicon).unwrap()

        report = evaluate(corpus, LexiconTagger(lexicon), classifier, cfg.word_offsets, cfg.tag_offsets)

        print("\n--- Comparison Metrics (vs. Reference) ---")
        print(json.dumps(report.summary(), indent=2))

        if args.disagreements_out:
            disagreements = report.disagreements()
            Path(args.disagreements_out).parent.mkdir(parents=True, exist_ok=True)
            print(f"\nWriting {len(disagreements)} disagreements to {args.disagreements_out}...")
            disagreements.to_csv(args.disagreements_out, index=False)

    except (FileNotFoundError, ValueError, TypeError, KeyError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
