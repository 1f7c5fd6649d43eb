"""
Pytest configuration and fixtures for sql-indent tests.
"""
import logging

import pytest

STYLES = ["basic", "streamline", "aligned", "dataops"]

# Representative queries covering the constructs the formatter handles
SAMPLE_QUERIES = {
    "simple_select": "select id, name, email from users where active = true order by name asc limit 10;",
    "join": "select u.id, u.name, o.total from users u inner join orders o on u.id = o.user_id "
            "where o.status = 'completed' order by o.total desc;",
    "subquery": "select name, email from users where id in (select user_id from orders "
                "where total > 100 and created_at > '2024-01-01');",
    "cte": "with active_users as (select id, name from users where active = true), "
           "user_orders as (select user_id, count(*) as order_count, sum(total) as total_spent "
           "from orders group by user_id) select au.name, uo.order_count, uo.total_spent "
           "from active_users au join user_orders uo on au.id = uo.user_id "
           "order by uo.total_spent desc;",
    "union": "select id, name, 'customer' as type from customers where active = true union all "
             "select id, name, 'supplier' as type from suppliers where active = true order by name;",
    "insert": "insert into users (name, email, role, created_at) values "
              "('Alice', 'alice@example.com', 'admin', now()), ('Bob', 'bob@example.com', 'user', now());",
    "update": "update orders set status = 'archived', updated_at = now() "
              "where created_at < '2023-01-01' and status = 'completed';",
    "create_table": "create table if not exists products (id serial primary key, "
                    "name varchar(255) not null, description text, "
                    "price decimal(10, 2) not null default 0.00, "
                    "category_id integer references categories(id), "
                    "created_at timestamp default current_timestamp, "
                    "updated_at timestamp default current_timestamp);",
    "window": "select name, department, salary, rank() over (partition by department order by "
              "salary desc) as dept_rank, avg(salary) over (partition by department) as dept_avg "
              "from employees where active = true;",
    "nested_subquery": "select d.name as department, (select count(*) from employees e "
                       "where e.department_id = d.id) as emp_count, (select avg(salary) "
                       "from employees e where e.department_id = d.id) as avg_salary "
                       "from departments d where exists (select 1 from employees e "
                       "where e.department_id = d.id and e.active = true) order by emp_count desc;",
    "comments": "-- monthly report\nselect a, -- first column\n b /* second */ from t "
                "where x between 1 and 10 and y = 'a''b';",
    "case_expression": "select case when score >= 90 and bonus then 'A' when score >= 80 "
                       "then 'B' else 'C' end as grade from results where term = $1;",
    "multi_statement": "delete from sessions where expires_at < now(); "
                       "select count(*) from sessions;",
}


@pytest.fixture(params=STYLES)
def style(request):
    """Each formatting style in turn."""
    return request.param


@pytest.fixture(params=sorted(SAMPLE_QUERIES))
def sample_sql(request):
    """Each sample query in turn."""
    return SAMPLE_QUERIES[request.param]


@pytest.fixture
def sql_file(tmp_path):
    """Write a query to a temporary .sql file."""
    path = tmp_path / "query.sql"
    path.write_text("select id, name from users", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo the CLI's logging setup so caplog sees package records."""
    yield
    package_logger = logging.getLogger("sql_indent")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
