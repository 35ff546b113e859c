"""create fleet, hr and registry tables"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _address_columns() -> list:
    return [
        sa.Column("street", sa.String(200), nullable=True),
        sa.Column("country_code", sa.String(2), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("region", sa.String(100), nullable=True),
        sa.Column("province", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("locality", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(10), nullable=True),
    ]


def _fk(column: str, target: str, **kwargs) -> sa.Column:
    nullable = kwargs.pop("nullable", True)
    return sa.Column(column, sa.Integer(), sa.ForeignKey(target, **kwargs), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "employee_roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("birth_place", sa.String(100), nullable=True),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("fiscal_code", sa.String(16), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("pec", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("mobile", sa.String(20), nullable=True),
        sa.Column("iban", sa.String(27), nullable=True),
        sa.Column("marital_status", sa.String(32), nullable=True),
        sa.Column("education_level", sa.String(32), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        *_address_columns(),
    )
    op.create_index("ix_employees_first_name", "employees", ["first_name"])
    op.create_index("ix_employees_last_name", "employees", ["last_name"])

    op.create_table(
        "employee_role_links",
        sa.Column(
            "employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "role_id", sa.Integer(), sa.ForeignKey("employee_roles.id", ondelete="CASCADE"), primary_key=True
        ),
    )

    op.create_table(
        "suppliers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("vat_number", sa.String(20), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("pec", sa.String(255), nullable=True),
        sa.Column("iban", sa.String(27), nullable=True),
        sa.Column("sdi_code", sa.String(7), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_address_columns(),
    )
    op.create_index("ix_suppliers_name", "suppliers", ["name"])

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("cig", sa.String(20), nullable=True),
        sa.Column("cup", sa.String(20), nullable=True),
        _fk("manager_id", "employees.id", ondelete="SET NULL"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="PLANNED"),
        sa.Column("work_description", sa.Text(), nullable=True),
        sa.Column("value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("advance_amount", sa.Float(), nullable=False, server_default="0"),
        *_address_columns(),
    )

    op.create_table(
        "employments",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("employee_id", "employees.id", nullable=False),
        sa.Column("matricola", sa.String(10), nullable=False, unique=True),
        sa.Column("contract_type", sa.String(32), nullable=True),
        sa.Column("branch", sa.String(100), nullable=True),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("job_title", sa.String(100), nullable=True),
        sa.Column("contract_level", sa.String(50), nullable=True),
        sa.Column("ccnl", sa.String(100), nullable=True),
        sa.Column("job_role", sa.String(100), nullable=True),
        sa.Column("salary", sa.Float(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="ACTIVE"),
    )
    op.create_index("ix_employments_employee_id", "employments", ["employee_id"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("plate", sa.String(10), nullable=False, unique=True),
        sa.Column("chassis_number", sa.String(17), nullable=True, unique=True),
        sa.Column("brand", sa.String(50), nullable=False),
        sa.Column("model", sa.String(50), nullable=False),
        sa.Column("series", sa.String(50), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("vehicle_type", sa.String(32), nullable=True),
        sa.Column("fuel_type", sa.String(32), nullable=True),
        sa.Column("ownership", sa.String(32), nullable=True),
        _fk("supplier_id", "suppliers.id", ondelete="SET NULL"),
        sa.Column("registration_date", sa.Date(), nullable=True),
        sa.Column("contract_start_date", sa.Date(), nullable=True),
        sa.Column("contract_end_date", sa.Date(), nullable=True),
        sa.Column("contract_duration_months", sa.Integer(), nullable=True),
        sa.Column("contract_km", sa.Integer(), nullable=True),
        sa.Column("monthly_fee", sa.Float(), nullable=False, server_default="0"),
        sa.Column("fringe_benefit", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(32), nullable=False, server_default="IN_SERVICE"),
        sa.Column("current_mileage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("telepass", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("insurance_expiry", sa.Date(), nullable=True),
        sa.Column("car_tax_expiry", sa.Date(), nullable=True),
        sa.Column("image_path", sa.String(500), nullable=True),
    )

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("employment_id", "employments.id", nullable=False),
        _fk("vehicle_id", "vehicles.id", nullable=False),
        _fk("project_id", "projects.id", ondelete="SET NULL"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="ASSIGNED"),
        sa.Column("note", sa.Text(), nullable=True),
    )
    op.create_index("ix_assignments_employment_id", "assignments", ["employment_id"])
    op.create_index("ix_assignments_vehicle_id", "assignments", ["vehicle_id"])

    op.create_table(
        "task_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("by_date", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("by_mileage", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("months_interval", sa.Integer(), nullable=True),
        sa.Column("km_interval", sa.Integer(), nullable=True),
        sa.Column("auto", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "maintenance",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("vehicle_id", "vehicles.id", nullable=False),
        _fk("supplier_id", "suppliers.id", ondelete="SET NULL"),
        _fk("task_type_id", "task_types.id", ondelete="SET NULL"),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_index("ix_maintenance_vehicle_id", "maintenance", ["vehicle_id"])

    op.create_table(
        "vehicle_tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("vehicle_id", "vehicles.id", nullable=False),
        _fk("task_type_id", "task_types.id", nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("due_mileage", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="OPEN"),
        sa.Column("executed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_vehicle_tasks_vehicle_id", "vehicle_tasks", ["vehicle_id"])

    op.create_table(
        "fuel_cards",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("card_number", sa.String(50), nullable=False, unique=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        _fk("supplier_id", "suppliers.id", ondelete="SET NULL"),
        _fk("employee_id", "employees.id", ondelete="SET NULL"),
        _fk("vehicle_id", "vehicles.id", ondelete="SET NULL"),
        sa.Column("plafond", sa.Float(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_fuel_cards_employee_id", "fuel_cards", ["employee_id"])
    op.create_index("ix_fuel_cards_vehicle_id", "fuel_cards", ["vehicle_id"])

    op.create_table(
        "refuels",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("vehicle_id", "vehicles.id", nullable=False),
        _fk("fuel_card_id", "fuel_cards.id", ondelete="SET NULL"),
        _fk("employee_id", "employees.id", ondelete="SET NULL"),
        sa.Column("refuel_date", sa.Date(), nullable=False),
        sa.Column("mileage", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False, server_default="0"),
    )
    op.create_index("ix_refuels_vehicle_id", "refuels", ["vehicle_id"])

    op.create_table(
        "expense_reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("number", sa.String(50), nullable=False),
        _fk("employee_id", "employees.id", nullable=False),
        sa.Column("purpose", sa.String(255), nullable=True),
        sa.Column("creation_date", sa.Date(), nullable=False),
        sa.Column("submit_date", sa.Date(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("approval_date", sa.Date(), nullable=True),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("reimbursable", sa.Float(), nullable=False, server_default="0"),
        sa.Column("non_reimbursable", sa.Float(), nullable=False, server_default="0"),
        _fk("project_id", "projects.id", ondelete="SET NULL"),
        sa.Column("payment_method", sa.String(32), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="DRAFT"),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_expense_reports_number", "expense_reports", ["number"])
    op.create_index("ix_expense_reports_employee_id", "expense_reports", ["employee_id"])

    op.create_table(
        "expense_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("report_id", "expense_reports.id", ondelete="CASCADE", nullable=False),
        sa.Column("item_date", sa.Date(), nullable=True),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("invoice_number", sa.String(50), nullable=True),
        _fk("supplier_id", "suppliers.id", ondelete="SET NULL"),
        _fk("project_id", "projects.id", ondelete="SET NULL"),
        sa.Column("note", sa.Text(), nullable=True),
    )
    op.create_index("ix_expense_items_report_id", "expense_items", ["report_id"])

    op.create_table(
        "payslips",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("employee_id", "employees.id", ondelete="SET NULL"),
        sa.Column("fiscal_code", sa.String(16), nullable=False),
        sa.Column("reference_month", sa.String(7), nullable=False),
        sa.Column("storage_path", sa.String(500), nullable=False),
        sa.Column("original_filename", sa.String(255), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="PENDING"),
    )
    op.create_index("ix_payslips_employee_id", "payslips", ["employee_id"])
    op.create_index("ix_payslips_fiscal_code", "payslips", ["fiscal_code"])
    op.create_index("ix_payslips_reference_month", "payslips", ["reference_month"])

    op.create_table(
        "contracts",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("supplier_id", "suppliers.id", nullable=False),
        _fk("project_id", "projects.id", ondelete="SET NULL"),
        sa.Column("contract_type", sa.String(32), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="DRAFT"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("termination_notice_days", sa.Integer(), nullable=True),
        sa.Column("expiry_reminder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("net_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("vat_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(32), nullable=False, server_default="EUR"),
        sa.Column("payment_terms", sa.String(255), nullable=True),
        sa.Column("periodic_fee", sa.Float(), nullable=True),
        sa.Column("recurring_frequency", sa.String(32), nullable=True),
        sa.Column("durc_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("durc_expiry", sa.Date(), nullable=True),
        sa.Column("reference_person", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_contracts_supplier_id", "contracts", ["supplier_id"])

    op.create_table(
        "insurances",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("project_id", "projects.id", ondelete="SET NULL"),
        _fk("supplier_id", "suppliers.id", ondelete="SET NULL"),
        sa.Column("policy_number", sa.String(50), nullable=False),
        sa.Column("policy_type", sa.String(100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("guaranteed_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_insurances_project_id", "insurances", ["project_id"])

    op.create_table(
        "correspondence",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("progressive", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("direction", sa.String(1), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("protocol_date", sa.Date(), nullable=True),
        sa.Column("sender", sa.String(200), nullable=False),
        sa.Column("recipient", sa.String(200), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.UniqueConstraint("year", "direction", "progressive", name="uq_correspondence_protocol"),
    )
    op.create_index("ix_correspondence_year", "correspondence", ["year"])

    op.create_table(
        "compliance_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )

    op.create_table(
        "compliance_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        _fk("category_id", "compliance_categories.id", nullable=False),
        _fk("employee_id", "employees.id", ondelete="SET NULL"),
        _fk("project_id", "projects.id", ondelete="SET NULL"),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("visit_date", sa.Date(), nullable=True),
        sa.Column("periodicity_years", sa.Integer(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_compliance_items_category_id", "compliance_items", ["category_id"])
    op.create_index("ix_compliance_items_due_date", "compliance_items", ["due_date"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("owner_type", sa.String(32), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("document_type", sa.String(40), nullable=False),
        sa.Column("path", sa.String(500), nullable=False),
        sa.Column("original_filename", sa.String(255), nullable=False),
        sa.Column("content_type", sa.String(150), nullable=True),
        sa.Column("size", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("issue_date", sa.Date(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_documents_owner", "documents", ["owner_type", "owner_id"])
    op.create_index("ix_documents_expiry_date", "documents", ["expiry_date"])


def downgrade() -> None:
    for table in (
        "documents",
        "compliance_items",
        "compliance_categories",
        "correspondence",
        "insurances",
        "contracts",
        "payslips",
        "expense_items",
        "expense_reports",
        "refuels",
        "fuel_cards",
        "vehicle_tasks",
        "maintenance",
        "task_types",
        "assignments",
        "vehicles",
        "employments",
        "projects",
        "suppliers",
        "employee_role_links",
        "employees",
        "employee_roles",
    ):
        op.drop_table(table)
