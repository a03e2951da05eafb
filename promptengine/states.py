"""FSM states for the blueprint workflow"""
from aiogram.fsm.state import State, StatesGroup

class BlueprintStates(StatesGroup):
    """States for blueprint generation workflow"""

    # Waiting for the product name
    waiting_for_product_name = State()

    # Picking a category from the list
    selecting_category = State()

    # Waiting for an optional reference photo (or skip)
    waiting_for_reference_image = State()

    # Generation in progress
    generating = State()

    # Cards shown, full prompts can be requested
    reviewing_blueprints = State()
