# catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


FOOD_ITEMS = [
    {"id": 1, "name": "Pizza", "price": "15.99"},
    {"id": 2, "name": "Garlic Bread", "price": "4.50"},
    {"id": 3, "name": "Tiramisu", "price": "6.75"},
    {"id": 4, "name": "Lemonade", "price": "3.20"},
]


@app.get("/food-items/by-name/{name}")
def get_food_item_by_name(name: str):
    for item in FOOD_ITEMS:
        if item["name"] == name:
            return item
    raise HTTPException(status_code=404, detail="Food item not found")
