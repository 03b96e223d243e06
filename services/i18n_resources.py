"""Translation tables. ``pt`` is partial; missing keys fall back to ``en``."""

EN = {
    "app_name": "CRM App",
    "dashboard": {
        "title": "Dashboard Overview",
        "total_customers": "Total Customers",
        "active_deals": "Active Deals",
        "pending_activities": "Pending Activities",
        "total_deal_value": "Total Deal Value",
        "deal_forecast": "Deal Forecast (Weighted)",
        "upcoming_activities": "Upcoming Activities",
        "no_upcoming_activities": "No upcoming activities.",
        "recent_won_deals": "Recently Won Deals",
        "no_recent_won_deals": "No recently won deals.",
        "due": "Due",
        "type": "Type",
        "customer": "Customer",
        "value": "Value",
        "won": "Won",
    },
    "customers": {
        "title": "Customers",
        "confirm_delete": "Are you sure you want to delete this customer? This will also delete related deals and activities.",
        "exported_success": "Customers exported to {{filename}}.json successfully!",
        "imported_success": "Customers imported successfully!",
        "import_failed": "Failed to import customers: {{message}}",
        "detail": {
            "details_title": "Details: {{customerName}}",
            "related_deals": "Related Deals",
            "no_related_deals": "No deals associated with this customer.",
            "no_related_deals_summary": "No related deals.",
            "related_activities": "Related Activities",
            "no_related_activities": "No activities associated with this customer.",
            "no_related_activities_summary": "No related activities.",
            "error_generating_summary": "Failed to generate summary.",
            "no_specific_notes": "No specific notes.",
            "follow_up_title": "Follow-up for: {{customerName}}",
            "follow_up_notes": 'Follow-up activity for customer: "{{customerName}}"',
        },
    },
    "suppliers": {
        "title": "Suppliers",
        "confirm_delete": "Are you sure you want to delete this supplier? This will also delete related activities.",
        "exported_success": "Suppliers exported to {{filename}}.json successfully!",
        "imported_success": "Suppliers imported successfully!",
        "import_failed": "Failed to import suppliers: {{message}}",
        "detail": {
            "details_title": "Details: {{supplierName}}",
            "related_activities": "Related Activities",
            "no_related_activities": "No activities associated with this supplier.",
            "no_related_activities_summary": "No related activities.",
            "error_generating_summary": "Failed to generate summary.",
            "no_specific_notes": "No specific notes.",
            "follow_up_title": "Follow-up for: {{supplierName}}",
            "follow_up_notes": 'Follow-up activity for supplier: "{{supplierName}}"',
        },
    },
    "deals": {
        "title": "Deals",
        "confirm_delete": "Are you sure you want to delete this deal? This will also delete related activities.",
        "exported_success": "Deals exported to {{filename}}.json successfully!",
        "imported_success": "Deals imported successfully!",
        "import_failed": "Failed to import deals: {{message}}",
        "detail": {
            "details_title": "Details: {{dealName}}",
            "related_activities": "Related Activities",
            "no_related_activities": "No activities associated with this deal.",
            "no_related_activities_summary": "No related activities.",
            "error_generating_summary": "Failed to generate summary.",
            "no_specific_notes": "No specific notes.",
            "follow_up_title": "Follow-up for: {{dealName}}",
            "follow_up_notes": 'Follow-up activity for deal: "{{dealName}}"',
        },
    },
    "activities": {
        "title": "Activities",
        "confirm_delete": "Are you sure you want to delete this activity?",
        "exported_success": "Activities exported to {{filename}}.json successfully!",
        "imported_success": "Activities imported successfully!",
        "import_failed": "Failed to import activities: {{message}}",
        "detail": {
            "details_title": "Details: {{activityTitle}}",
            "follow_up_title": "Follow-up for: {{title}}",
            "follow_up_notes": 'Follow-up for activity: "{{title}}"',
        },
    },
    "campaigns": {
        "title": "Marketing Campaigns",
        "confirm_delete": "Are you sure you want to delete this campaign?",
        "exported_success": "Campaigns exported to {{filename}}.json successfully!",
        "imported_success": "Campaigns imported successfully!",
        "import_failed": "Failed to import campaigns: {{message}}",
    },
    "products": {
        "title": "Products",
        "confirm_delete": "Are you sure you want to delete this product?",
        "exported_success": "Products exported to {{filename}}.json successfully!",
        "imported_success": "Products imported successfully!",
        "import_failed": "Failed to import products: {{message}}",
    },
    "commissions": {
        "title": "Commissions Overview",
        "total_won_value": "Total Won Deal Value",
        "total_commission": "Total Commission",
        "current_rate": "Current Rate: {{rate}}%",
        "rate_out_of_range": "Commission rate must be between 0 and 1.",
        "no_won_deals": "No deals have been won yet.",
        "deal_name": "Deal Name",
        "customer": "Customer",
        "deal_value": "Deal Value",
        "commission": "Commission",
    },
    "auth_page": {
        "email_required": "Email is required",
        "email_invalid": "Email is invalid",
        "email_already_registered": "Email is already registered.",
        "password_required": "Password is required",
        "password_length": "Password must be at least 6 characters long",
        "confirm_password_required": "Confirm password is required",
        "passwords_not_match": "Passwords do not match",
        "username_required": "Username is required",
        "role_invalid": "Role must be Admin, Sales or Viewer",
        "invalid_credentials": "Invalid email or password.",
        "login_required": "Please log in to continue.",
    },
    "roles": {
        "admin": "Admin",
        "sales": "Sales",
        "viewer": "Viewer",
    },
    "common": {
        "welcome": "Welcome, {{username}}!",
        "na": "N/A",
        "error": "Error!",
        "error_message": "{{message}}",
        "not_found": "The requested record could not be found.",
        "import_format_invalid": "Invalid import file: {{message}}",
        "validation_failed": "Please correct the highlighted fields.",
        "permission_denied": "Permission Denied: You do not have the necessary permissions for this action.",
        "owner": "Owner",
    },
    "sidebar": {
        "dashboard": "Dashboard",
        "customers": "Customers",
        "suppliers": "Suppliers",
        "products": "Products",
        "deals": "Deals",
        "activities": "Activities",
        "campaigns": "Campaigns",
        "commissions": "Commissions",
    },
}

PT = {
    "app_name": "App de CRM",
    "dashboard": {
        "title": "Visão Geral do Painel",
        "total_customers": "Total de Clientes",
        "active_deals": "Negócios Ativos",
        "pending_activities": "Atividades Pendentes",
        "total_deal_value": "Valor Total dos Negócios",
        "deal_forecast": "Previsão de Negócios (Ponderada)",
        "upcoming_activities": "Próximas Atividades",
        "no_upcoming_activities": "Nenhuma atividade futura.",
        "recent_won_deals": "Negócios Ganhos Recentemente",
        "no_recent_won_deals": "Nenhum negócio ganho recentemente.",
        "due": "Vence",
        "type": "Tipo",
        "customer": "Cliente",
        "value": "Valor",
        "won": "Ganho",
    },
    "customers": {
        "title": "Clientes",
        "confirm_delete": "Tem certeza de que deseja excluir este cliente? Isso também excluirá negócios e atividades relacionados.",
        "exported_success": "Clientes exportados para {{filename}}.json com sucesso!",
        "imported_success": "Clientes importados com sucesso!",
        "import_failed": "Falha ao importar clientes: {{message}}",
        "detail": {
            "details_title": "Detalhes: {{customerName}}",
            "related_deals": "Negócios Relacionados",
            "no_related_deals": "Nenhum negócio associado a este cliente.",
            "related_activities": "Atividades Relacionadas",
            "no_related_activities": "Nenhuma atividade associada a este cliente.",
            "error_generating_summary": "Falha ao gerar resumo.",
            "no_specific_notes": "Nenhuma nota específica.",
            "follow_up_title": "Seguimento para: {{customerName}}",
            "follow_up_notes": 'Atividade de seguimento para o cliente: "{{customerName}}"',
        },
    },
    "suppliers": {
        "title": "Fornecedores",
        "confirm_delete": "Tem certeza de que deseja excluir este fornecedor? Isso também excluirá atividades relacionadas.",
        "exported_success": "Fornecedores exportados para {{filename}}.json com sucesso!",
        "imported_success": "Fornecedores importados com sucesso!",
        "import_failed": "Falha ao importar fornecedores: {{message}}",
        "detail": {
            "details_title": "Detalhes: {{supplierName}}",
            "related_activities": "Atividades Relacionadas",
            "no_related_activities": "Nenhuma atividade associada a este fornecedor.",
            "error_generating_summary": "Falha ao gerar resumo.",
            "no_specific_notes": "Nenhuma nota específica.",
        },
    },
    "deals": {
        "title": "Negócios",
        "confirm_delete": "Tem certeza de que deseja excluir este negócio? Isso também excluirá atividades relacionadas.",
        "exported_success": "Negócios exportados para {{filename}}.json com sucesso!",
        "imported_success": "Negócios importados com sucesso!",
        "import_failed": "Falha ao importar negócios: {{message}}",
        "detail": {
            "details_title": "Detalhes: {{dealName}}",
            "related_activities": "Atividades Relacionadas",
            "no_related_activities": "Nenhuma atividade associada a este negócio.",
            "error_generating_summary": "Falha ao gerar resumo.",
            "no_specific_notes": "Nenhuma nota específica.",
        },
    },
    "activities": {
        "detail": {
            "details_title": "Detalhes: {{activityTitle}}",
            "follow_up_title": "Seguimento para: {{title}}",
            "follow_up_notes": 'Seguimento para a atividade: "{{title}}"',
        },
    },
}

RESOURCES = {
    "en": EN,
    "pt": PT,
}
