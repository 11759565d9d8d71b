from tests.factories import make_category


def test_list_categories(client, db, category):
    make_category(db, name="Laptops")

    response = client.get("/api/v1/category/getCatergory")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Categories Fetched"
    assert [c["name"] for c in body["categories"]] == ["Laptops", "Phones"]


def test_products_by_unknown_category(client, db):
    response = client.get("/api/v1/category/products-by-category", params={"categoryId": 999})
    assert response.status_code == 404
    assert response.json()["message"] == "Category not found"


def test_products_by_category_uses_camel_case(client, category, product):
    response = client.get("/api/v1/category/products-by-category", params={"categoryId": category.id})

    item = response.json()["products"][0]
    assert item["categoryId"] == category.id
    assert item["isActive"] is True
    assert item["sizes"] == ["S", "M"]


def test_get_product(client, category, product):
    response = client.get("/api/v1/category/getProduct", params={"productId": product.id})

    assert response.status_code == 200
    body = response.json()["product"]
    assert body["name"] == "Pixel"
    assert body["category"]["name"] == "Phones"


def test_get_product_requires_id(client, db):
    response = client.get("/api/v1/category/getProduct")
    assert response.status_code == 400
    assert response.json()["message"] == "Product Id required"


def test_get_missing_product(client, db):
    response = client.get("/api/v1/category/getProduct", params={"productId": 42})
    assert response.status_code == 404
    assert response.json()["message"] == "Product Not Exist"


def test_non_numeric_query_is_a_bad_request(client, db):
    response = client.get("/api/v1/category/getProduct", params={"productId": "abc"})
    assert response.status_code == 400
    assert response.json()["success"] is False
