"""
Challenge Track Curricula
Ordered skill list for each difficulty track. Each entry is one challenge in the track.
"""

BEGINNER_CURRICULUM = [
    {"id": 1, "topic": "SELECT & Aliasing", "description": "Retrieve specific columns and rename them using AS."},
    {"id": 2, "topic": "SELECT DISTINCT", "description": "Retrieve unique values from a column to remove duplicates."},
    {"id": 3, "topic": "SELECT * (Wildcard)", "description": "Retrieve all columns from a table."},
    {"id": 4, "topic": "LIMIT / TOP", "description": "Restrict the number of rows returned."},
    {"id": 5, "topic": "WHERE & Comparison", "description": "Filter rows using =, !=."},
    {"id": 6, "topic": "WHERE & Comparison", "description": "Filter rows using <, > operators."},
    {"id": 7, "topic": "AND Logic", "description": "Filter rows requiring multiple conditions to be true."},
    {"id": 8, "topic": "OR Logic", "description": "Filter rows where at least one condition is true."},
    {"id": 9, "topic": "NOT Logic", "description": "Filter rows by negating a condition."},
    {"id": 10, "topic": "BETWEEN", "description": "Filter values within a specific range."},
    {"id": 11, "topic": "IN Operator", "description": "Filter values matching a list of possibilities."},
    {"id": 12, "topic": "LIKE Wildcards", "description": "Pattern matching using % and _."},
    {"id": 13, "topic": "IS NULL / IS NOT NULL", "description": "Filter for missing or present values."},
    {"id": 14, "topic": "ORDER BY", "description": "Sort results in Ascending or Descending order."},
    {"id": 15, "topic": "Multi-Column Sorting", "description": "Sort by one column, then another."},
    {"id": 16, "topic": "COUNT()", "description": "Count the number of rows matching a criteria."},
    {"id": 17, "topic": "SUM()", "description": "Calculate the total sum of a numeric column."},
    {"id": 18, "topic": "AVG()", "description": "Calculate the average value of a numeric column."},
    {"id": 19, "topic": "MIN() / MAX()", "description": "Find the minimum and maximum values."},
    {"id": 20, "topic": "GROUP BY & HAVING", "description": "Group rows and filter groups based on aggregate values."},
]

INTERMEDIATE_CURRICULUM = [
    {"id": 1, "topic": "GROUP BY (Advanced)", "description": "Group by multiple columns with aggregation."},
    {"id": 2, "topic": "INNER JOIN", "description": "Combine rows from two tables based on a related column."},
    {"id": 3, "topic": "LEFT JOIN", "description": "Retrieve all records from the left table and matching records from the right."},
    {"id": 4, "topic": "UNION / UNION ALL", "description": "Combine result sets of two or more SELECT statements."},
    {"id": 5, "topic": "INTERSECT / EXCEPT", "description": "Return common rows or unique rows between two queries."},
    {"id": 6, "topic": "CASE (Simple)", "description": "Conditional logic to transform data values."},
    {"id": 7, "topic": "CASE (Searched)", "description": "Complex conditional logic with multiple criteria."},
    {"id": 8, "topic": "COALESCE / NULLIF", "description": "Handle NULL values effectively."},
    {"id": 9, "topic": "CAST / CONVERT", "description": "Change data types of columns."},
    {"id": 10, "topic": "String Functions (Basic)", "description": "Use CONCAT and SUBSTRING."},
    {"id": 11, "topic": "String Functions (Advanced)", "description": "Use TRIM, LENGTH, and REPLACE."},
    {"id": 12, "topic": "Date Functions (Diff)", "description": "Calculate differences between dates (DATEDIFF)."},
    {"id": 13, "topic": "Date Functions (Add/Extract)", "description": "Add intervals to dates or extract parts (DATEADD, EXTRACT)."},
    {"id": 14, "topic": "Numeric Functions", "description": "Use ROUND, CEIL, FLOOR, ABS."},
    {"id": 15, "topic": "Subqueries (WHERE)", "description": "Use a subquery inside a WHERE clause."},
    {"id": 16, "topic": "Subqueries (SELECT/FROM)", "description": "Use subqueries in the SELECT list or FROM clause."},
    {"id": 17, "topic": "CTEs (Simple)", "description": "Create a Common Table Expression for readability."},
    {"id": 18, "topic": "CTEs (Multi-step)", "description": "Chain CTEs for complex logic."},
    {"id": 19, "topic": "Complex Joins", "description": "Join more than two tables to solve a business problem."},
    {"id": 20, "topic": "Capstone Logic", "description": "Combine Aggregates, Joins, and Logic for a complex report."},
]

CURRICULA = {
    "beginner": BEGINNER_CURRICULUM,
    "intermediate": INTERMEDIATE_CURRICULUM,
}
