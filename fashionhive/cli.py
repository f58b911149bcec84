#!/usr/bin/env python3
"""
FashionHive storefront CLI

Browse the catalog API and manage a cart kept on local disk. Checkout is a
simulation: it validates the delivery details and clears the brand's items.

Usage:
    fashionhive brands
    fashionhive products --brand Khaadi --sort price-asc
    fashionhive cart add 65f0c0ffee0000000000000a --size M --qty 2
    fashionhive cart show
    fashionhive checkout Khaadi --name "Ayesha Khan" --email a@example.com \
        --phone 03001234567 --city Lahore --address "12 Main Blvd"
"""
import argparse
import asyncio
import os
import sys
from decimal import Decimal
from typing import Optional

import httpx
from dotenv import load_dotenv
from pydantic import ValidationError

from fashionhive.cart import CartEngine, CheckoutError, CheckoutForm, FileStorage, checkout_brand
from fashionhive.client import API_URL, CatalogClient, CatalogClientError
from fashionhive.logging import get_logger
from fashionhive.services.money import format_money
from fashionhive.services.queries import (
    SORT_NAME_ASC,
    SORT_NAME_DESC,
    SORT_NEWEST,
    SORT_PRICE_ASC,
    SORT_PRICE_DESC,
)

logger = get_logger(__name__)

DEFAULT_CART_PATH = "~/.fashionhive/cart.json"


# ==================== OUTPUT ====================

def _print_products(products: list[dict]) -> None:
    for p in products:
        price = format_money(p.get("numericPrice", 0))
        print(f"  {p.get('_id')}  {p.get('brandCollection', ''):<14} {price:>12}  {p.get('name', '')}")


def _print_page(result: dict) -> None:
    _print_products(result.get("data", []))
    print(f"\nPage {result.get('page')}/{result.get('pages')} - {result.get('total')} products")


def _print_cart(engine: CartEngine) -> None:
    if not engine.items:
        print("Your cart is empty.")
        return

    for brand, items in engine.group_by_brand().items():
        group_total = sum((item.line_total for item in items), Decimal("0"))
        print(f"{brand}  (total: {format_money(group_total)})")
        for item in items:
            variant = item.size if not item.color else f"{item.size}/{item.color}"
            print(
                f"  {item.product_id}  {variant:<10} x{item.quantity:<3} "
                f"{format_money(item.line_total):>12}  {item.product.name}"
            )
    print(f"\n{engine.total_items} items, total {format_money(engine.total_price)}")


# ==================== COMMANDS ====================

async def _browse(args: argparse.Namespace, client: CatalogClient) -> int:
    if args.command == "brands":
        result = await client.get_brands()
        for brand in result.get("data", []):
            print(f"  {brand['name']:<16} {brand['productCount']:>5} products  {', '.join(brand['categories'])}")
    elif args.command == "categories":
        result = await client.get_categories()
        for category in result.get("data", []):
            print(f"  {category}")
    elif args.command == "featured":
        result = await client.get_featured(args.limit)
        _print_products(result.get("data", []))
    elif args.command == "product":
        product = (await client.get_product(args.product_id))["data"]
        print(f"{product.get('name')} ({product.get('brandCollection')})")
        print(f"  Price:    {product.get('price')}")
        print(f"  Category: {product.get('category') or '-'}")
        for url in product.get("image_urls") or []:
            print(f"  Image:    {url}")
    elif args.command == "products":
        filters = {
            "category": args.category,
            "search": args.search,
            "minPrice": args.min_price,
            "maxPrice": args.max_price,
            "page": args.page,
            "limit": args.limit,
            "sort": args.sort,
        }
        if args.brand:
            result = await client.get_products_by_brand(args.brand, **filters)
        else:
            result = await client.get_products(**filters)
        _print_page(result)
    return 0


async def _fetch_product(api_url: str, product_id: str, transport) -> dict:
    async with CatalogClient(api_url, transport=transport) as client:
        return (await client.get_product(product_id))["data"]


def _cart(args: argparse.Namespace, engine: CartEngine, transport) -> int:
    action = args.cart_action
    if action == "add":
        product = asyncio.run(_fetch_product(args.api_url, args.product_id, transport))
        result = engine.add_item(product, args.qty, args.size, args.color)
        print(result.message)
        if not result.success:
            return 1
        print(f"{result.total_items} items, total {format_money(result.total_price)}")
    elif action == "update":
        engine.update_quantity(args.product_id, args.size, args.color, args.qty)
        _print_cart(engine)
    elif action == "remove":
        engine.remove_item(args.product_id, args.size, args.color)
        _print_cart(engine)
    elif action == "clear":
        if args.brand:
            engine.clear_brand(args.brand)
        else:
            engine.clear_cart()
        _print_cart(engine)
    else:
        _print_cart(engine)
    return 0


def _checkout(args: argparse.Namespace, engine: CartEngine) -> int:
    try:
        form = CheckoutForm(
            full_name=args.name,
            email=args.email,
            phone=args.phone,
            city=args.city,
            address=args.address,
            postal_code=args.postal_code,
            notes=args.notes,
        )
        receipt = checkout_brand(engine, args.brand, form)
    except ValidationError as e:
        for error in e.errors():
            print(f"Invalid {error['loc'][0]}: {error['msg']}")
        return 1
    except CheckoutError as e:
        print(str(e))
        return 1

    print(f"Order placed with {receipt.brand} for {receipt.customer.full_name}")
    print(f"  {receipt.total_items} items, total {format_money(receipt.total)}")
    print(f"  Delivering to {receipt.customer.address}, {receipt.customer.city}")
    return 0


# ==================== PARSER ====================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fashionhive", description="FashionHive storefront")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("FASHIONHIVE_API_URL", API_URL),
        help="Catalog API base URL",
    )
    parser.add_argument(
        "--cart-file",
        default=os.environ.get("FASHIONHIVE_CART_PATH", DEFAULT_CART_PATH),
        help="Where the cart is kept",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("brands", help="List brands")
    sub.add_parser("categories", help="List categories")

    featured = sub.add_parser("featured", help="Random picks across brands")
    featured.add_argument("--limit", type=int, default=8)

    product = sub.add_parser("product", help="Show one product")
    product.add_argument("product_id")

    products = sub.add_parser("products", help="Browse products")
    products.add_argument("--brand")
    products.add_argument("--category")
    products.add_argument("--search")
    products.add_argument("--min-price", type=float)
    products.add_argument("--max-price", type=float)
    products.add_argument("--page", type=int, default=1)
    products.add_argument("--limit", type=int, default=20)
    products.add_argument(
        "--sort",
        default=SORT_PRICE_DESC,
        choices=[SORT_PRICE_ASC, SORT_PRICE_DESC, SORT_NAME_ASC, SORT_NAME_DESC, SORT_NEWEST],
    )

    cart = sub.add_parser("cart", help="Manage the cart")
    cart_sub = cart.add_subparsers(dest="cart_action")
    cart_sub.add_parser("show")

    add = cart_sub.add_parser("add")
    add.add_argument("product_id")
    add.add_argument("--size", default="")
    add.add_argument("--color", default="")
    add.add_argument("--qty", type=int, default=1)

    update = cart_sub.add_parser("update")
    update.add_argument("product_id")
    update.add_argument("--size", required=True)
    update.add_argument("--color", default="")
    update.add_argument("--qty", type=int, required=True)

    remove = cart_sub.add_parser("remove")
    remove.add_argument("product_id")
    remove.add_argument("--size", required=True)
    remove.add_argument("--color", default="")

    clear = cart_sub.add_parser("clear")
    clear.add_argument("--brand")

    checkout = sub.add_parser("checkout", help="Check out one brand")
    checkout.add_argument("brand")
    checkout.add_argument("--name", required=True)
    checkout.add_argument("--email", required=True)
    checkout.add_argument("--phone", required=True)
    checkout.add_argument("--city", required=True)
    checkout.add_argument("--address", required=True)
    checkout.add_argument("--postal-code")
    checkout.add_argument("--notes")

    return parser


def main(argv: Optional[list[str]] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        if args.command in ("cart", "checkout"):
            engine = CartEngine(FileStorage(args.cart_file))
            if args.command == "cart":
                return _cart(args, engine, transport)
            return _checkout(args, engine)

        async def run() -> int:
            async with CatalogClient(args.api_url, transport=transport) as client:
                return await _browse(args, client)

        return asyncio.run(run())
    except CatalogClientError as e:
        print(f"Error: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
