# load_data.py
"""
Load the CSV exports under data/ (billboards, rate card, contracts, payments)
into the database.
"""

from scripts.ingest import DATA_DIR, load_into_db, parse_all


def main():
    parsed = parse_all(DATA_DIR)
    load_into_db({kind: records for kind, (records, _) in parsed.items()})

    print("Load complete.")
    for kind, (_, stats) in parsed.items():
        print(f"{kind + ':':<12} {stats['n_records']} of {stats['n_rows']} rows loaded, "
              f"{stats['n_errors']} with errors")


if __name__ == "__main__":
    main()
