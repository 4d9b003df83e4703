"""
Copy the IDL of the deployed market hours program.
"""
import json
from os.path import join, exists, dirname, realpath

SCRIPT_DIR = dirname(realpath(__file__))
IDL_DIR = realpath(join(SCRIPT_DIR, "../cranker/bin/idl"))
IDL_NAME = "nft_market_hours.json"

INSTRUCTIONS = ("createOracle", "crankOracle")


def main(args):
    target_dir = join(args.anchor_repo, "target")
    assert exists(target_dir), "Anchor program not built."
    idl_path = join(target_dir, "idl", IDL_NAME)
    assert exists(idl_path), f"No IDL at {idl_path}"

    idl = from_json(idl_path)
    assert not is_new_format(idl), \
        "IDL was written by Anchor >= 0.30, which anchorpy cannot load. " \
        "Convert it to the legacy format (camelCase names, metadata.address) first."

    names = [ix["name"] for ix in idl["instructions"]]
    for name in INSTRUCTIONS:
        assert name in names, f"IDL is missing instruction {name}"

    to_json(idl, join(args.out_dir, IDL_NAME))

    print("done.")


def is_new_format(idl):
    # Anchor >= 0.30 moved the program id to the top level and added a spec version
    return "address" in idl or "spec" in idl.get("metadata", {})


def from_json(path):
    with open(path) as fp:
        result = json.load(fp)
    return result


def to_json(data, path):
    with open(path, 'w') as fp:
        json.dump(data, fp, indent=2)


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("anchor_repo",
                        type=str,
                        help="Path to the Anchor workspace of the program",
                        )
    parser.add_argument("--out-dir",
                        type=str,
                        default=IDL_DIR,
                        )
    args = parser.parse_args()

    main(args)
