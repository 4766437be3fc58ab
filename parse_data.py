# parse_data.py
"""
Parse the CSV exports under data/ and print basic stats without loading them.
"""

from scripts.ingest import DATA_DIR, parse_all


def main():
    parsed = parse_all(DATA_DIR)

    for kind, (_, stats) in parsed.items():
        print(f"[{kind}]")
        print(f"Total CSV rows read:   {stats['n_rows']}")
        print(f"Records parsed:        {stats['n_records']}")
        print(f"Rows with errors:      {stats['n_errors']}")

        if stats["error_examples"]:
            print("\nExample errors:")
            for ex in stats["error_examples"]:
                print(f"- Row {ex['row_number']}: {ex['error']}")
        print()


if __name__ == "__main__":
    main()
