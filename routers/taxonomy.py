from fastapi import APIRouter, Depends, HTTPException
from pymongo.database import Database

from database import find_by_ids, get_db, get_documents, serialize_doc, utcnow
from listing import DEFAULT_SORT, sort_alternatives
from queries import approved_counts, build_category_tree, find_by_slug, populate_alternatives, with_counts

router = APIRouter(tags=["taxonomy"])

BY_NAME = [("name", 1)]


@router.get("/categories")
def list_categories(tree: bool = False, db: Database = Depends(get_db)):
    categories = with_counts(get_documents(db, "category", sort=BY_NAME), approved_counts(db, "categories"))
    return build_category_tree(categories) if tree else categories


@router.get("/categories/{slug}")
def get_category(slug: str, db: Database = Depends(get_db)):
    category = find_by_slug(db, "category", slug)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    counts = approved_counts(db, "categories")
    item = with_counts([category], counts)[0]
    item["children"] = with_counts(get_documents(db, "category", {"parent_id": item["id"]}, sort=BY_NAME), counts)
    if category.get("parent_id"):
        parent = find_by_ids(db, "category", [category["parent_id"]]).get(category["parent_id"])
        item["parent"] = {"id": category["parent_id"], "name": parent["name"], "slug": parent["slug"]} if parent else None
    return item


@router.get("/tags")
def list_tags(db: Database = Depends(get_db)):
    return with_counts(get_documents(db, "tag", sort=BY_NAME), approved_counts(db, "tags"))


@router.get("/tech-stacks")
def list_tech_stacks(db: Database = Depends(get_db)):
    return with_counts(get_documents(db, "techstack", sort=BY_NAME), approved_counts(db, "tech_stacks"))


@router.get("/proprietary")
def list_proprietary(db: Database = Depends(get_db)):
    return with_counts(get_documents(db, "proprietarysoftware", sort=BY_NAME), approved_counts(db, "alternative_to"))


@router.get("/proprietary/{slug}")
def get_proprietary(slug: str, sort: str = DEFAULT_SORT, db: Database = Depends(get_db)):
    """A proprietary product with its approved open source alternatives."""
    software = find_by_slug(db, "proprietarysoftware", slug)
    if not software:
        raise HTTPException(status_code=404, detail="Proprietary software not found")

    item = serialize_doc(software)
    docs = sort_alternatives(list(db["alternative"].find({"approved": True, "alternative_to": item["id"]})), sort, utcnow())
    item["alternatives"] = populate_alternatives(db, docs)
    item["alternatives_count"] = len(docs)
    categories = find_by_ids(db, "category", software.get("categories") or [])
    item["categories"] = [
        {"id": cid, "name": categories[cid]["name"], "slug": categories[cid]["slug"]}
        for cid in software.get("categories") or []
        if cid in categories
    ]
    return item
