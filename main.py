# C:\dev\maxent_tagger\main.py

import argparse
import sys
from pathlib import Path

# Add project root to path for robust execution
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from maxent.classifier import Classifier
from maxent.config import load_config
from maxent.evaluation import tag_sentence
from maxent.lexicon import Lexicon, LexiconTagger


def main():
    """
    Main command-line interface for the maximum-entropy tagger.

    This script tags raw text with a trained model. It performs the following steps:
    1.  Loads the configuration file (`config.yaml`) for the context windows
        and the default model locations.
    2.  Loads the classifier and the lexicon.
    3.  Tags each non-empty line of the input file as one whitespace-tokenized
        sentence, falling back to the lexicon when the classifier has no evidence.
    4.  Writes one `word/TAG` sentence per line to the output file, or to stdout.
    """
    parser = argparse.ArgumentParser(
        description="Tag raw text with a trained maximum-entropy part-of-speech model.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Path to the input text file, one sentence per line."
    )
    parser.add_argument(
        "--output",
        help="Path to write the tagged text. Prints to stdout when omitted."
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the configuration YAML file."
    )
    parser.add_argument("--classifier", help="Classifier JSON file (defaults to paths.classifier).")
    parser.add_argument("--lexicon", help="Lexicon JSON file (defaults to paths.lexicon).")
    args = parser.parse_args()

    try:
        # 1. Load configuration
        print(f"Loading configuration from {args.config}...", file=sys.stderr)
        cfg = load_config(args.config)
        config_dir = Path(args.config).parent

        # 2. Load the model
        classifier_path = Path(args.classifier) if args.classifier else config_dir / cfg.paths["classifier"]
        lexicon_path = Path(args.lexicon) if args.lexicon else config_dir / cfg.paths["lexicon"]
        print(f"Loading classifier from {classifier_path}...", file=sys.stderr)
        classifier = Classifier.load(classifier_path).unwrap()
        print(f"Loading lexicon from {lexicon_path}...", file=sys.stderr)
        lexicon = Lexicon.load(lexicon_path).unwrap()
        tagger = LexiconTagger(lexicon)

        # 3. Tag the input
        with open(args.input, "r", encoding="utf-8") as f:
            lines = [line.split() for line in f if line.strip()]

        tagged_lines = []
        fallbacks = 0
        for words in lines:
            decisions = tag_sentence(words, tagger, classifier, cfg.word_offsets, cfg.tag_offsets)
            fallbacks += sum(d.fallback for d in decisions)
            tagged_lines.append(" ".join(f"{d.word}/{d.tag}" for d in decisions))
        output = "\n".join(tagged_lines) + ("\n" if tagged_lines else "")

        # 4. Write the output
        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(output)
            print(f"\nSuccessfully wrote {len(tagged_lines)} tagged sentences to {args.output}", file=sys.stderr)
        else:
            sys.stdout.write(output)
        print(f"{fallbacks} words were tagged with lexicon defaults.", file=sys.stderr)

    except (FileNotFoundError, ValueError, TypeError, KeyError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
