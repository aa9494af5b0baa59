"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db, utcnow

from .family import FamilyGroup, FamilyGroupMember
from .recipe import Recipe, RecipeIngredient
from .favorite import Favorite
from .mealplan import MealPlan, MealPlanSlot
from .shopping import GroceryList, GroceryItem
from .budget import ApiBudgetWindow

__all__ = [
    'db',
    'utcnow',
    'FamilyGroup',
    'FamilyGroupMember',
    'Recipe',
    'RecipeIngredient',
    'Favorite',
    'MealPlan',
    'MealPlanSlot',
    'GroceryList',
    'GroceryItem',
    'ApiBudgetWindow',
]
