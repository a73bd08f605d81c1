"""
Catálogo de templates por tipo de notificação e idioma.

Cada entrada tem `subject` (opcional) e `body`. Variáveis no formato {{nome}}.
"""

NOTIFICATION_TEMPLATES = {
    "payment_reminder": {
        "en": {
            "subject": "Payment Reminder - {{unitNumber}}",
            "body": (
                "Dear {{tenantName}},\n\n"
                "This is a friendly reminder that your rent payment of {{amount}} for unit {{unitNumber}} "
                "is due on {{dueDate}} ({{daysUntilDue}} days from today).\n\n"
                "Payment Details:\n"
                "- Amount: {{amount}}\n"
                "- Due Date: {{dueDate}}\n"
                "- Unit: {{unitNumber}}\n"
                "- Building: {{buildingName}}\n\n"
                "Please ensure timely payment to avoid any late fees.\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "تذكير بالدفع - {{unitNumber}}",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "هذا تذكير ودي بأن دفعة الإيجار الخاصة بك بقيمة {{amount}} للوحدة {{unitNumber}} "
                "مستحقة في {{dueDate}} (بعد {{daysUntilDue}} يوم).\n\n"
                "تفاصيل الدفع:\n"
                "- المبلغ: {{amount}}\n"
                "- تاريخ الاستحقاق: {{dueDate}}\n"
                "- الوحدة: {{unitNumber}}\n"
                "- المبنى: {{buildingName}}\n\n"
                "يرجى التأكد من الدفع في الوقت المناسب لتجنب أي رسوم تأخير.\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
    "payment_received": {
        "en": {
            "subject": "Payment Received - Thank You!",
            "body": (
                "Dear {{tenantName}},\n\n"
                "We have successfully received your payment of {{amount}} for unit {{unitNumber}}.\n\n"
                "Payment Details:\n"
                "- Amount Received: {{amount}}\n"
                "- Payment Date: {{paymentDate}}\n"
                "- Unit: {{unitNumber}}\n"
                "- Reference: {{referenceNumber}}\n\n"
                "Thank you for your prompt payment!\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "تم استلام الدفعة - شكراً لك!",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "لقد استلمنا بنجاح دفعتك بقيمة {{amount}} للوحدة {{unitNumber}}.\n\n"
                "تفاصيل الدفعة:\n"
                "- المبلغ المستلم: {{amount}}\n"
                "- تاريخ الدفع: {{paymentDate}}\n"
                "- الوحدة: {{unitNumber}}\n"
                "- الرقم المرجعي: {{referenceNumber}}\n\n"
                "شكراً لك على الدفع الفوري!\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
    "payment_overdue": {
        "en": {
            "subject": "URGENT: Payment Overdue - {{unitNumber}}",
            "body": (
                "Dear {{tenantName}},\n\n"
                "Your rent payment for unit {{unitNumber}} is now overdue.\n\n"
                "Overdue Details:\n"
                "- Original Amount: {{amount}}\n"
                "- Due Date: {{dueDate}}\n"
                "- Days Overdue: {{daysOverdue}}\n"
                "- Late Fee: {{lateFee}}\n"
                "- Total Amount Due: {{totalAmount}}\n\n"
                "Please make the payment immediately to avoid further action.\n\n"
                "Regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "عاجل: دفعة متأخرة - {{unitNumber}}",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "دفعة الإيجار الخاصة بك للوحدة {{unitNumber}} متأخرة الآن.\n\n"
                "تفاصيل التأخير:\n"
                "- المبلغ الأصلي: {{amount}}\n"
                "- تاريخ الاستحقاق: {{dueDate}}\n"
                "- أيام التأخير: {{daysOverdue}}\n"
                "- رسوم التأخير: {{lateFee}}\n"
                "- إجمالي المبلغ المستحق: {{totalAmount}}\n\n"
                "يرجى السداد فوراً لتجنب اتخاذ إجراءات أخرى.\n\n"
                "مع التحية،\n"
                "{{companyName}}"
            ),
        },
    },
    "monthly_unpaid_summary": {
        "en": {
            "subject": "Unpaid Rent Summary - {{unitNumber}}",
            "body": (
                "Dear {{tenantName}},\n\n"
                "Our records show {{paymentCount}} unpaid rent payment(s) for unit {{unitNumber}}:\n\n"
                "{{paymentList}}\n\n"
                "Total outstanding: {{totalAmount}}\n\n"
                "Please settle the outstanding amount as soon as possible.\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "ملخص الإيجارات غير المدفوعة - {{unitNumber}}",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "تظهر سجلاتنا {{paymentCount}} دفعة إيجار غير مدفوعة للوحدة {{unitNumber}}:\n\n"
                "{{paymentList}}\n\n"
                "إجمالي المبلغ المستحق: {{totalAmount}}\n\n"
                "يرجى سداد المبلغ المستحق في أقرب وقت ممكن.\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
    "contract_expiring": {
        "en": {
            "subject": "Contract Expiring Soon - {{unitNumber}}",
            "body": (
                "Dear {{tenantName}},\n\n"
                "Your lease contract for unit {{unitNumber}} will expire on {{expiryDate}} "
                "({{daysRemaining}} days remaining).\n\n"
                "Contract Details:\n"
                "- Unit: {{unitNumber}}\n"
                "- Building: {{buildingName}}\n"
                "- Current Rent: {{currentRent}}\n"
                "- Expiry Date: {{expiryDate}}\n\n"
                "Please contact us to discuss renewal options.\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "العقد ينتهي قريباً - {{unitNumber}}",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "عقد الإيجار الخاص بك للوحدة {{unitNumber}} سينتهي في {{expiryDate}} "
                "(متبقي {{daysRemaining}} يوم).\n\n"
                "تفاصيل العقد:\n"
                "- الوحدة: {{unitNumber}}\n"
                "- المبنى: {{buildingName}}\n"
                "- الإيجار الحالي: {{currentRent}}\n"
                "- تاريخ الانتهاء: {{expiryDate}}\n\n"
                "يرجى الاتصال بنا لمناقشة خيارات التجديد.\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
    "contract_renewed": {
        "en": {
            "subject": "Contract Renewed Successfully",
            "body": (
                "Dear {{tenantName}},\n\n"
                "Your lease contract for unit {{unitNumber}} has been successfully renewed.\n\n"
                "New Contract Details:\n"
                "- Unit: {{unitNumber}}\n"
                "- New Start Date: {{startDate}}\n"
                "- New End Date: {{endDate}}\n"
                "- Monthly Rent: {{monthlyRent}}\n"
                "- Security Deposit: {{securityDeposit}}\n\n"
                "Thank you for continuing with us!\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "تم تجديد العقد بنجاح",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "تم تجديد عقد الإيجار الخاص بك للوحدة {{unitNumber}} بنجاح.\n\n"
                "تفاصيل العقد الجديد:\n"
                "- الوحدة: {{unitNumber}}\n"
                "- تاريخ البداية الجديد: {{startDate}}\n"
                "- تاريخ الانتهاء الجديد: {{endDate}}\n"
                "- الإيجار الشهري: {{monthlyRent}}\n"
                "- التأمين: {{securityDeposit}}\n\n"
                "شكراً لاستمرارك معنا!\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
    "welcome": {
        "en": {
            "subject": "Welcome to {{companyName}}!",
            "body": (
                "Dear {{tenantName}},\n\n"
                "Welcome to {{companyName}}! We're delighted to have you as our tenant.\n\n"
                "Your Details:\n"
                "- Unit: {{unitNumber}}\n"
                "- Building: {{buildingName}}\n"
                "- Move-in Date: {{moveInDate}}\n"
                "- Monthly Rent: {{monthlyRent}}\n\n"
                "If you have any questions, please don't hesitate to contact us.\n\n"
                "Best regards,\n"
                "{{companyName}} Team"
            ),
        },
        "ar": {
            "subject": "مرحباً بك في {{companyName}}!",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "مرحباً بك في {{companyName}}! يسعدنا أن نرحب بك كمستأجر لدينا.\n\n"
                "تفاصيلك:\n"
                "- الوحدة: {{unitNumber}}\n"
                "- المبنى: {{buildingName}}\n"
                "- تاريخ الانتقال: {{moveInDate}}\n"
                "- الإيجار الشهري: {{monthlyRent}}\n\n"
                "إذا كان لديك أي أسئلة، لا تتردد في الاتصال بنا.\n\n"
                "مع أطيب التحيات،\n"
                "فريق {{companyName}}"
            ),
        },
    },
    "maintenance_scheduled": {
        "en": {
            "subject": "Maintenance Scheduled - {{unitNumber}}",
            "body": (
                "Dear {{tenantName}},\n\n"
                "Maintenance work has been scheduled for your unit.\n\n"
                "Maintenance Details:\n"
                "- Unit: {{unitNumber}}\n"
                "- Date: {{maintenanceDate}}\n"
                "- Time: {{maintenanceTime}}\n"
                "- Type: {{maintenanceType}}\n"
                "- Expected Duration: {{duration}}\n\n"
                "Please ensure someone is available at the scheduled time.\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "صيانة مجدولة - {{unitNumber}}",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "تم جدولة أعمال صيانة لوحدتك.\n\n"
                "تفاصيل الصيانة:\n"
                "- الوحدة: {{unitNumber}}\n"
                "- التاريخ: {{maintenanceDate}}\n"
                "- الوقت: {{maintenanceTime}}\n"
                "- النوع: {{maintenanceType}}\n"
                "- المدة المتوقعة: {{duration}}\n\n"
                "يرجى التأكد من وجود شخص في الوقت المحدد.\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
    "announcement": {
        "en": {
            "subject": "{{subject}}",
            "body": (
                "Dear {{tenantName}},\n\n"
                "{{message}}\n\n"
                "Best regards,\n"
                "{{companyName}}"
            ),
        },
        "ar": {
            "subject": "{{subject}}",
            "body": (
                "عزيزي/عزيزتي {{tenantName}}،\n\n"
                "{{message}}\n\n"
                "مع أطيب التحيات،\n"
                "{{companyName}}"
            ),
        },
    },
}
