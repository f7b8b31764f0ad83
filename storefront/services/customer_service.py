from sqlalchemy.orm import Session
from storefront.data.models.customer import CustomerModel
from storefront.repos.customer_repo import CustomerRepo
from storefront.domain.schemas import CustomerCreate, CustomerRead


class CustomerService:
    def __init__(self, db: Session):
        self.repo = CustomerRepo(db)

    def create_customer(self, payload: CustomerCreate) -> CustomerRead:
        existing = self.repo.get_customer(payload.id)
        if existing:
            return CustomerRead.model_validate(existing)

        customer = CustomerModel(
            id=payload.id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
        )
        created = self.repo.create_customer(customer)
        return CustomerRead.model_validate(created)

    def get_customer(self, customer_id: int) -> CustomerRead:
        customer = self.repo.get_customer(customer_id)
        if not customer:
            raise ValueError("Customer not found")
        return CustomerRead.model_validate(customer)

    def ensure_can_order(self, customer_id: int):
        customer = self.repo.get_customer(customer_id)
        if not customer:
            raise ValueError("Customer not found")
        if customer.is_banned:
            raise PermissionError("Customer is not allowed to place orders")
