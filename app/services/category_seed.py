"""Seed the default category taxonomy into an empty categories table.

The seeded names are the names the built-in keyword dictionary joins on.
"""

import logging
from typing import Any, Dict, List

from supabase import Client

from app.db.categories import count_categories, create_category

logger = logging.getLogger(__name__)

SEED_CATEGORIES: List[Dict[str, Any]] = [
    {
        "name": "مستندات إدارية",
        "description": "مستندات متعلقة بالشؤون الإدارية والتنظيمية",
        "children": [
            {"name": "تقارير", "description": "تقارير إدارية وإحصائية"},
            {"name": "مذكرات", "description": "مذكرات وملاحظات داخلية"},
            {"name": "عقود", "description": "عقود واتفاقيات"},
        ],
    },
    {
        "name": "مستندات تقنية",
        "description": "مستندات متعلقة بالجوانب التقنية والفنية",
        "children": [
            {"name": "أدلة المستخدم", "description": "أدلة استخدام وإرشادات"},
            {"name": "وثائق فنية", "description": "وثائق فنية ومعمارية"},
            {"name": "مواصفات", "description": "مواصفات ومتطلبات"},
        ],
    },
    {
        "name": "مستندات مالية",
        "description": "مستندات متعلقة بالشؤون المالية والمحاسبية",
        "children": [
            {"name": "فواتير", "description": "فواتير وإيصالات"},
            {"name": "تقارير مالية", "description": "تقارير وقوائم مالية"},
            {"name": "ميزانيات", "description": "ميزانيات وتخطيط مالي"},
        ],
    },
]


async def seed_categories(client: Client) -> Dict[str, Any]:
    """Insert the default taxonomy unless categories already exist.

    Returns:
        Dict with ``seeded`` (bool), ``message`` and ``count``

    Raises:
        RuntimeError: If counting or inserting fails
    """
    existing = await count_categories(client)
    if existing > 0:
        return {"seeded": False, "message": "Categories already exist", "count": existing}

    inserted = 0
    for root in SEED_CATEGORIES:
        parent = await create_category(client, root["name"], description=root["description"])
        inserted += 1
        for child in root["children"]:
            await create_category(
                client,
                child["name"],
                parent_id=parent.id,
                description=child["description"],
            )
            inserted += 1

    logger.info(f"Seeded {inserted} categories")
    return {"seeded": True, "message": "Categories seeded successfully", "count": inserted}
