from datetime import datetime

from extensions import db
from utils import records
from utils.money import to_amount


class Student(db.Model):
    __tablename__ = 'students'

    pk = db.Column(db.Integer, primary_key=True)
    # Sheet-issued identifier (e.g. "S123456")
    id = db.Column(db.String(64), unique=True, nullable=False)
    roll = db.Column(db.String(32), nullable=False, default='')
    name = db.Column(db.String(150), nullable=False)
    class_name = db.Column(db.String(50), index=True)
    father_name = db.Column(db.String(150), default='')
    phone = db.Column(db.String(32), default='')
    admission_date = db.Column(db.String(32))
    transport_fee = db.Column(db.Numeric(10, 2))
    total_paid = db.Column(db.Numeric(12, 2), default=0)
    status = db.Column(db.String(8))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_record(self):
        return records.Student(
            id=self.id,
            roll=self.roll or '',
            name=self.name or '',
            class_name=self.class_name or '',
            transport_fee=None if self.transport_fee is None else to_amount(self.transport_fee),
            status=self.status or None,
            father_name=self.father_name or '',
            phone=self.phone or '',
            admission_date=self.admission_date,
            total_paid=to_amount(self.total_paid),
        )

    @classmethod
    def from_record(cls, rec):
        return cls(
            id=rec.id,
            roll=rec.roll,
            name=rec.name,
            class_name=rec.class_name,
            father_name=rec.father_name,
            phone=rec.phone,
            admission_date=rec.admission_date,
            transport_fee=rec.transport_fee,
            total_paid=rec.total_paid,
            status=rec.status,
        )

    def __repr__(self):
        return f'<Student {self.name} ({self.id})>'


class ClassConfig(db.Model):
    __tablename__ = 'class_configs'

    # Autoincrement id preserves sheet order so "first match wins" holds
    id = db.Column(db.Integer, primary_key=True)
    class_name = db.Column(db.String(50), nullable=False)
    monthly_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    def to_record(self):
        return records.ClassConfig(class_name=self.class_name, monthly_fee=to_amount(self.monthly_fee))

    def __repr__(self):
        return f'<ClassConfig {self.class_name}={self.monthly_fee}>'


class ExamFeeConfig(db.Model):
    __tablename__ = 'exam_fee_configs'

    id = db.Column(db.Integer, primary_key=True)
    exam_name = db.Column(db.String(120), nullable=False)
    # class label -> fee, stored as strings to keep Decimal precision
    fees = db.Column(db.JSON, nullable=False, default=dict)

    def to_record(self):
        return records.ExamFeeConfig.from_dict({"examName": self.exam_name, "fees": self.fees or {}})

    def __repr__(self):
        return f'<ExamFeeConfig {self.exam_name}>'


class Payment(db.Model):
    __tablename__ = 'payments'

    pk = db.Column(db.Integer, primary_key=True)
    id = db.Column(db.String(64), unique=True, nullable=False)
    # No foreign key: a payment survives the removal of its student
    student_id = db.Column(db.String(64), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_type = db.Column(db.String(50), nullable=False)
    date = db.Column(db.String(32), nullable=False)
    month = db.Column(db.String(20))
    exam_name = db.Column(db.String(120))
    received_by = db.Column(db.String(100), default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_record(self):
        return records.Payment(
            id=self.id,
            student_id=self.student_id,
            amount=to_amount(self.amount),
            payment_type=self.payment_type,
            date=self.date or '',
            month=self.month,
            exam_name=self.exam_name,
            received_by=self.received_by or '',
        )

    def __repr__(self):
        return f'<Payment StudentID={self.student_id} Paid={self.amount}>'


class FinanceRecord(db.Model):
    __tablename__ = 'finance_records'

    pk = db.Column(db.Integer, primary_key=True)
    id = db.Column(db.String(64), unique=True, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    record_type = db.Column(db.String(32), nullable=False, index=True)
    category = db.Column(db.String(100), default='')
    date = db.Column(db.String(32), nullable=False)
    noted_by = db.Column(db.String(100), default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_record(self):
        return records.FinanceRecord(
            id=self.id,
            title=self.title,
            amount=to_amount(self.amount),
            record_type=self.record_type,
            category=self.category or '',
            date=self.date or '',
            noted_by=self.noted_by or '',
        )

    def __repr__(self):
        return f'<FinanceRecord {self.title} {self.amount}>'


class Teacher(db.Model):
    __tablename__ = 'teachers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    status = db.Column(db.String(8))

    def to_record(self):
        return records.Teacher(name=self.name, status=self.status or None)

    def __repr__(self):
        return f'<Teacher {self.name}>'


class AppSetting(db.Model):
    __tablename__ = 'app_settings'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), nullable=False, unique=True)
    value = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
