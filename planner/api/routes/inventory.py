"""Inventory routes: ingredient ledger, custom categories and receipt import."""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from planner.api.deps import get_session, command_result
from planner.logic.importing.reconciler import merge_receipt_items
from planner.logic.inventory import commands
from planner.logic.inventory.analysis import compute_expiring_soon, compute_depleted, sorted_inventory
from planner.logic.session import PlannerSession
from planner.utilities.validators import (
    IngredientInput, IngredientPatch, CountAdjustInput, CategoryInput, InventorySortInput, ReceiptImportInput
)

router = APIRouter(prefix="/api")


@router.get("/inventory")
def get_inventory(sort: Optional[str] = Query(default=None, pattern=r'^(category|expiry)$'),
                  session: PlannerSession = Depends(get_session)):
    state = session.state
    return {
        "sort": sort or state.inventory_sort,
        "items": [i.to_dict() for i in sorted_inventory(state, sort)],
        "expiringSoon": compute_expiring_soon(state.ingredients),
        "depleted": compute_depleted(state.ingredients),
    }


@router.post("/inventory/sort")
def set_sort(body: InventorySortInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.set_inventory_sort, body.sort))


@router.post("/ingredients")
def add_ingredient(body: IngredientInput, session: PlannerSession = Depends(get_session)):
    fields = body.model_dump(exclude_unset=True)
    name = fields.pop("name")
    count = fields.pop("count", 0)
    return command_result(session, session.dispatch(commands.add_or_merge_ingredient, name, count, **fields))


@router.patch("/ingredients/{ingredient_id}")
def update_ingredient(ingredient_id: str, body: IngredientPatch, session: PlannerSession = Depends(get_session)):
    patch = body.model_dump(exclude_unset=True)
    return command_result(session, session.dispatch(commands.update_ingredient, ingredient_id, **patch))


@router.post("/ingredients/{ingredient_id}/adjust")
def adjust_ingredient(ingredient_id: str, body: CountAdjustInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.adjust_ingredient_count, ingredient_id, body.delta))


@router.post("/ingredients/{ingredient_id}/pin")
def pin_ingredient(ingredient_id: str, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.toggle_ingredient_pinned, ingredient_id))


@router.delete("/ingredients/{ingredient_id}")
def delete_ingredient(ingredient_id: str, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.delete_ingredient, ingredient_id))


@router.delete("/ingredients")
def clear_inventory(session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.clear_inventory))


@router.post("/categories")
def add_category(body: CategoryInput, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.add_custom_category, body.name))


@router.delete("/categories/{name}")
def delete_category(name: str, session: PlannerSession = Depends(get_session)):
    return command_result(session, session.dispatch(commands.delete_custom_category, name))


@router.post("/import/receipt")
def import_receipt(body: ReceiptImportInput, session: PlannerSession = Depends(get_session)):
    items = [item.model_dump() for item in body.items]
    return command_result(session, session.dispatch(merge_receipt_items, items))
