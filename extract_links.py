import argparse
import sys

from schoolphotos.utils.corpus import save_links
from schoolphotos.utils.mail import SENDER, links_from_eml_dir


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Collect Social Schools photo links from exported .eml files")
    p.add_argument("--mail-dir", required=True, help="Folder with exported notification e-mails (*.eml)")
    p.add_argument("--sender", default=SENDER, help="Only messages from this address are used")
    p.add_argument("--subject-prefix", default="", help="Stripped from subjects, e.g. the school name")
    p.add_argument("--out-json", default="links.json", help="Output JSON path")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    links = links_from_eml_dir(args.mail_dir, sender=args.sender, subject_prefix=args.subject_prefix)
    if not links:
        print("[DONE] No e-mails with Social Schools links found.")
        return 0

    save_links(args.out_json, links)
    print(f"[OK] {len(links)} link(s) extracted → {args.out_json}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
