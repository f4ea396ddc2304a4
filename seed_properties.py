#!/usr/bin/env python3
"""
Load sample listings into a running Rental Listings API.

The listings are the Nairobi and Mombasa examples the web client was
first built against.  They are submitted through the public API, so
they go through exactly the same validation as listings entered in
the form.

Usage:
    python seed_properties.py --base-url http://localhost:8000
    python seed_properties.py --base-url http://localhost:8000 --dry-run
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from rental_listings_client import RentalListingsAPI

SAMPLE_PROPERTIES: List[Dict[str, Any]] = [
    {
        "title": "Spacious 2 Bedroom Apt in Kilimani",
        "price": 75000,
        "location": "Kilimani, Nairobi",
        "description": "Modern apartment with great views and amenities.",
        "bedrooms": 2,
        "bathrooms": 2,
        "area": 120,
        "amenities": ["Parking", "Swimming Pool", "Gym"],
    },
    {
        "title": "Cozy Studio near Yaya Centre",
        "price": 40000,
        "location": "Kilimani, Nairobi",
        "description": "Perfect studio for singles or couples.",
        "bedrooms": 0,
        "bathrooms": 1,
        "area": 45,
        "amenities": ["Parking", "Security"],
    },
    {
        "title": "Family Home in Lavington",
        "price": 150000,
        "location": "Lavington, Nairobi",
        "description": "Beautiful 4-bedroom house with a garden.",
        "bedrooms": 4,
        "bathrooms": 3,
        "area": 300,
        "amenities": ["Parking", "Garden", "Security"],
    },
    {
        "title": "Beachfront Villa in Nyali",
        "price": 120000,
        "location": "Nyali, Mombasa",
        "description": "Stunning villa with direct beach access.",
        "bedrooms": 3,
        "bathrooms": 3,
        "area": 250,
        "amenities": ["Parking", "Swimming Pool", "Beach Access"],
    },
    {
        "title": "Affordable Bedsitter in Roysambu",
        "price": 15000,
        "location": "Roysambu, Nairobi",
        "description": "Budget-friendly bedsitter, close to TRM.",
        "bedrooms": 0,
        "bathrooms": 1,
        "area": 30,
        "amenities": ["Security"],
    },
    {
        "title": "Modern 1 Bedroom in Westlands",
        "price": 60000,
        "location": "Westlands, Nairobi",
        "description": "Chic apartment in a prime location.",
        "bedrooms": 1,
        "bathrooms": 1,
        "area": 65,
        "amenities": ["Parking", "Gym", "Security"],
    },
]


def seed(client: RentalListingsAPI, properties: List[Dict[str, Any]]) -> int:
    """Create every listing and return the number of failures."""
    failures = 0
    for payload in properties:
        created, error = client.create_property(payload)
        if error:
            failures += 1
            print(f"[!] {payload['title']}: {error['message']}", file=sys.stderr)
            continue
        print(f"[+] {created['title']} -> {created['id']}")
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Seed the rental listings API with sample properties.")
    ap.add_argument("--base-url", default="http://localhost:8000", help="Service URL (default: %(default)s)")
    ap.add_argument("--api-prefix", default="/api", help="Route prefix (default: %(default)s)")
    ap.add_argument("--dry-run", action="store_true", help="Only print the listings that would be created")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    if args.dry_run:
        for payload in SAMPLE_PROPERTIES:
            print(f"[=] {payload['title']} ({payload['location']}, {payload['price']})")
        return 0

    client = RentalListingsAPI(base_url=args.base_url, api_prefix=args.api_prefix)
    failures = seed(client, SAMPLE_PROPERTIES)
    if failures:
        print(f"[!] {failures} listing(s) could not be created.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
