import pytest

from josm.errors import DuplicateEntry, InsufficientStock, IllegalTransition, NotFound, ValidationError
from josm.models import MaterialRequest, MaterialTransaction
from josm.services import materials, requests


@pytest.fixture
def mcb(ctx):
    return materials.create_material({
        "category": "Breakers", "name": "16A MCB", "quantity": 10, "min_threshold": 5,
    })


def test_create_material_writes_initial_receipt(mcb):
    txs = materials.list_transactions(mcb.id)
    assert len(txs) == 1
    assert txs[0].transaction_type == "receive"
    assert txs[0].quantity == 10
    assert txs[0].notes == "Initial stock"


def test_duplicate_material_rejected(mcb):
    with pytest.raises(DuplicateEntry):
        materials.create_material({"category": "Breakers", "name": "16A MCB"})


def test_receive_and_issue_keep_ledger_balanced(mcb, user):
    keeper = user("store_keeper")

    materials.receive_material(mcb.id, 7, keeper)
    materials.issue_material(mcb.id, 4, keeper, job_card_number="JC-0001")
    materials.return_material(mcb.id, 1, keeper)

    assert mcb.quantity == 10 + 7 - 4 + 1

    txs = materials.list_transactions(mcb.id)
    signed = sum(t.quantity if t.transaction_type != "issue" else -t.quantity for t in txs)
    assert signed == mcb.quantity


def test_issue_more_than_stock_is_rejected(mcb, user):
    keeper = user("store_keeper")

    with pytest.raises(InsufficientStock) as exc:
        materials.issue_material(mcb.id, 11, keeper)

    assert exc.value.available == 10
    assert exc.value.requested == 11
    assert mcb.quantity == 10


@pytest.mark.parametrize("qty", [0, -3, "abc", None])
def test_quantities_must_be_positive(mcb, user, qty):
    with pytest.raises(ValidationError):
        materials.receive_material(mcb.id, qty, user("store_keeper"))


def test_update_material_does_not_touch_quantity(mcb):
    materials.update_material(mcb.id, {"min_threshold": 8, "quantity": 999, "unit": "pcs"})
    assert mcb.min_threshold == 8
    assert mcb.quantity == 10


def test_negative_threshold_rejected(mcb):
    with pytest.raises(ValidationError):
        materials.update_material(mcb.id, {"min_threshold": -1, "unit": "box"})
    assert mcb.min_threshold == 5
    assert mcb.unit != "box"


def test_low_stock(mcb, user):
    assert materials.low_stock_materials() == []
    materials.issue_material(mcb.id, 5, user("store_keeper"))
    assert materials.low_stock_materials() == [mcb]


def test_missing_material(ctx):
    with pytest.raises(NotFound):
        materials.receive_material(123, 1)


# ------------------------- material requests -------------------------
def test_request_approval_scenario(mcb, user):
    worker = user("worker")
    keeper = user("store_keeper")

    big = requests.create_request(mcb.id, 12, "JC-0001", worker)
    with pytest.raises(InsufficientStock):
        requests.approve_request(big.id, keeper)

    big = requests.get_request(big.id)
    assert big.status == "pending"
    assert big.approved_by is None
    assert mcb.quantity == 10

    small = requests.create_request(mcb.id, 4, "JC-0001", worker)
    requests.approve_request(small.id, keeper)

    assert small.status == "approved"
    assert small.approved_by == keeper.id
    assert small.approved_by_name == keeper.name
    assert small.approval_date is not None
    assert mcb.quantity == 6

    issue = MaterialTransaction.query.filter_by(transaction_type="issue").one()
    assert issue.quantity == 4
    assert issue.job_card_number == "JC-0001"
    assert issue.user_id == keeper.id


def test_reject_only_stamps_approver(mcb, user):
    worker = user("worker")
    keeper = user("store_keeper")

    req = requests.create_request(mcb.id, 2, "JC-0003", worker)
    requests.reject_request(req.id, keeper, notes="wrong breaker size")

    assert req.status == "rejected"
    assert req.approved_by_name == keeper.name
    assert req.notes == "wrong breaker size"
    assert mcb.quantity == 10
    assert MaterialTransaction.query.filter_by(transaction_type="issue").count() == 0


def test_request_decided_only_once(mcb, user):
    worker = user("worker")
    keeper = user("store_keeper")

    req = requests.create_request(mcb.id, 2, "JC-0001", worker)
    requests.approve_request(req.id, keeper)

    with pytest.raises(IllegalTransition):
        requests.approve_request(req.id, keeper)
    with pytest.raises(IllegalTransition):
        requests.reject_request(req.id, keeper)
    assert mcb.quantity == 8


def test_request_needs_job_card_and_material(mcb, user):
    worker = user("worker")
    with pytest.raises(ValidationError):
        requests.create_request(mcb.id, 1, "", worker)
    with pytest.raises(NotFound):
        requests.create_request(999, 1, "JC-0001", worker)
    assert MaterialRequest.query.count() == 0


def test_list_requests_by_requester(mcb, user):
    worker = user("worker")
    sup = user("supervisor")
    requests.create_request(mcb.id, 1, "JC-0001", worker)
    requests.create_request(mcb.id, 1, "JC-0002", sup)

    assert len(requests.list_requests()) == 2
    assert [r.job_card_number for r in requests.list_requests(requested_by=worker.id)] == ["JC-0001"]
    assert requests.list_requests(status="approved") == []
