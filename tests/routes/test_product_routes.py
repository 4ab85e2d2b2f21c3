import pytest

from conftest import auth_header, make_product, make_user
from ecohub.core.errors import NotFoundError, ValidationError
from ecohub.models.product import Product
from ecohub.routes.product_routes import (
    ProductRequest,
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)


def test_create_product_applies_defaults_and_starts_pending(db) -> None:
    response = create_product(ProductRequest(name='Reusable Straw', price=3.0), db=db)

    product = db.get(Product, response['productId'])
    assert response['message'] == 'Product created'
    assert product.status == 'pending'
    assert product.stock == 0
    assert product.eco_rating == 5
    assert product.co2_reduction_kg == 0.0
    assert product.description == ''
    assert product.category_id is None


@pytest.mark.parametrize('fields', [{'price': 3.0}, {'name': 'Reusable Straw'}, {'name': 'Reusable Straw', 'price': 0}])
def test_create_product_requires_name_and_price(db, fields: dict) -> None:
    with pytest.raises(ValidationError) as exception_info:
        create_product(ProductRequest(**fields), db=db)

    assert exception_info.value.message == 'Name and price are required'


def test_list_products_only_returns_approved(db) -> None:
    approved = make_product(db, name='Solar Charger', status='approved')
    make_product(db, name='Pending Jar')
    make_product(db, name='Rejected Bag', status='rejected')

    assert [product.id for product in list_products(db=db)] == [approved.id]


def test_get_product_returns_any_status(db) -> None:
    product = make_product(db, status='rejected')

    assert get_product(product_id=product.id, db=db).status == 'rejected'


def test_get_product_unknown_id_is_not_found(db) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        get_product(product_id=404, db=db)

    assert exception_info.value.message == 'Product not found'


def test_update_product_keeps_name_and_resets_optional_fields(db) -> None:
    product = make_product(db, name='Bamboo Brush', status='approved', stock=12, eco_rating=3)

    update_product(product_id=product.id, data=ProductRequest(price=6.25), db=db)

    db.expire_all()
    updated = db.get(Product, product.id)
    assert updated.name == 'Bamboo Brush'
    assert updated.price == 6.25
    assert updated.stock == 0
    assert updated.eco_rating == 5
    assert updated.status == 'approved'


def test_update_product_unknown_id_is_not_found(db) -> None:
    with pytest.raises(NotFoundError):
        update_product(product_id=404, data=ProductRequest(name='x', price=1.0), db=db)


def test_delete_product(db) -> None:
    product = make_product(db)

    assert delete_product(product_id=product.id, db=db) == {'message': 'Product deleted'}
    assert db.get(Product, product.id) is None
    with pytest.raises(NotFoundError):
        delete_product(product_id=product.id, db=db)


def test_product_mutations_require_seller_or_admin(client, db) -> None:
    member = make_user(db, 'moss')
    seller = make_user(db, 'ivy', role='seller')
    admin = make_user(db, 'root', role='admin')
    payload = {'name': 'Compost Bin', 'price': 30}

    anonymous = client.post('/products', json=payload)
    forbidden = client.post('/products', json=payload, headers=auth_header(member))
    by_seller = client.post('/products', json=payload, headers=auth_header(seller))
    by_admin = client.post('/products', json=payload, headers=auth_header(admin))

    assert anonymous.status_code == 401
    assert forbidden.status_code == 403
    assert forbidden.json() == {'message': 'Seller access required'}
    assert by_seller.status_code == 201
    assert by_admin.status_code == 201


def test_any_seller_can_edit_any_product(client, db) -> None:
    seller = make_user(db, 'ivy', role='seller')
    product = make_product(db, name='Someone Else Listed This')

    response = client.put(f'/products/{product.id}', json={'name': 'Edited'}, headers=auth_header(seller))

    assert response.status_code == 200
    assert client.get(f'/products/{product.id}').json()['name'] == 'Edited'
