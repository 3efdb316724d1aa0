# ---------- TEST DATA HELPERS ----------

def availability_dict(checkin="2024-07-15", checkout="2024-07-20", houses=2, guests=None):
    data = {"checkinDate": checkin, "checkoutDate": checkout, "houses": houses}
    if guests is not None:
        data["guests"] = guests
    return data


def reservation_dict(
    checkin="2024-07-15",
    checkout="2024-07-20",
    houses=1,
    guests=2,
    first_name="Alice",
    last_name="Smith",
    email="alice@example.com",
    total_price=400.0,
    special_requests=None,
):
    data = {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "checkinDate": checkin,
        "checkoutDate": checkout,
        "guests": guests,
        "houses": houses,
        "totalPrice": total_price,
    }
    if special_requests is not None:
        data["specialRequests"] = special_requests
    return data
