"""
Simple simulator: push a few transactions through the gate, then try to mine.
Run (with app.py and the remote chain service up):
    python scripts/simulate_transactions.py
"""
import os
import random
from datetime import date, timedelta

import requests

API = os.getenv("GATE_URL", "http://localhost:8000")

def main():
    r = requests.put(f"{API}/api/trigger-conditions", json={
        "minQuantity": 10,
        "maxTemperature": 8,
        "maxDeliveryDate": str(date.today() + timedelta(days=7)),
    })
    print("conditions:", r.status_code, r.text)

    for i in range(5):
        body = {
            "sender": "Baan Mae Rim Farm",
            "recipient": random.choice(["Cold Room #1", "Warehouse CM", "Retail Store A"]),
            "product": random.choice(["Hydro Lettuce", "Kale", "Spinach"]),
            "quantity": str(random.randint(5, 50)),
            "location": "Mae Rim, Chiang Mai",
            "status": random.choice(["Pending", "Processing"]),
            "temperature": str(random.randint(2, 12)),
            "deliveryDate": str(date.today() + timedelta(days=random.randint(1, 10))),
        }
        rr = requests.post(f"{API}/api/transactions", json=body)
        print("transaction", i, rr.status_code, rr.text)

    for row in requests.get(f"{API}/api/pending-transactions").json():
        print(row.get("_id"), "ok" if row["meets_conditions"] else f"fails {row['failed_rules']}")

    rr = requests.post(f"{API}/api/mine")
    print("mine:", rr.status_code, rr.text)

if __name__ == "__main__":
    main()
