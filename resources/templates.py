from string import Template

stylesheet = '''body {
    margin: 0;
    padding: 0;
    font-size: 1rem;
    color: #111827;
    line-height: 1.6;
}
header {
    margin: 0;
    padding: 1rem;
    background-color: #f9fafb;
}
h1 {
    font-size: 1.5rem;
    margin: 0;
    padding: 0;
}
main {
    padding: 1rem;
    margin-top: 3rem;
}
footer {
    padding: 1rem;
    margin-top: 3rem;
    background-color: #f9fafb;
}
address a {
    color: #111827;
    text-decoration: underline;
}
section + section {
    margin-top: 4rem;
}
.header {
    font-size: 1.25rem;
    margin: 0;
    padding: 0;
}
.date {
    margin-top: 0.5rem;
    font-size: 1rem;
}
.result {
    margin-top: 0.5rem;
    border: 1px solid #d1d5db;
    border-collapse: collapse;
    font-size: 0.875rem;
}
tbody tr:nth-child(even) {
    background-color: #f9fafb;
}
th {
    padding: 1rem;
    border: 1px solid #d1d5db;
    text-align: center;
    font-weight: bold;
}
td {
    padding: 1rem;
    border: 1px solid #d1d5db;
    text-align: center;
}
td span:not(.none) {
    display: inline-block;
    padding: 0.125rem 1rem;
    font-size: 0.75rem;
    border-radius: 0.25rem;
    font-weight: bold;
}
span.fail {
    background-color: #dc2626;
    color: white;
}
span.softfail {
    background-color: #fcd34d;
}
span.pass {
    background-color: #15803d;
    color: white;
}
td.none {
    color: #6b7280;
}
section.error .header {
    color: #dc2626;
}
.message {
    margin-top: 0.5rem;
    padding: 1rem;
    border: 1px solid #fca5a5;
    background-color: #fef2f2;
    font-family: monospace;
    white-space: pre-wrap;
}'''

document_header_template = '''<!DOCTYPE html>
<html lang="ja">
    <head>
        <meta charset="utf-8">
        <title>$title</title>
        <style>
$stylesheet
        </style>
    </head>
    <body>
        <header>
            <h1>$title</h1>
        </header>
        <main>
'''

document_footer_template = '''        </main>
        <footer>
            <address><a href="$attribution_url" target="_blank">$attribution_label</a></address>
        </footer>
    </body>
</html>
'''

report_section_template = '''<section>
    <h2 class="header">ID: $report_id</h2>
    <p class="date">$period_begin ～ $period_end</p>
    <table class="result">
        <thead>
            <tr>
$header_cells
            </tr>
        </thead>
        <tbody>
$rows
        </tbody>
    </table>
</section>
'''

header_cell_template = '''                <th>$label</th>'''

row_template = '''            <tr>
$cells
            </tr>'''

value_cell_template = '''                <td class="$category">$value</td>'''

badge_cell_template = '''                <td class="$category"><span class="$category">$value</span></td>'''

placeholder_row_template = '''            <tr>
                <td class="none" colspan="$columns">$value</td>
            </tr>'''

error_section_template = '''<section class="error">
    <h2 class="header">Error: $filename</h2>
    <p class="message">$message</p>
</section>
'''

notice_section_template = '''<section>
    <h2 class="header">$heading</h2>
    <p class="message">$message</p>
</section>
'''

templates = {
    "document-header": Template(document_header_template),
    "document-footer": Template(document_footer_template),
    "report-section": Template(report_section_template),
    "header-cell": Template(header_cell_template),
    "row": Template(row_template),
    "value-cell": Template(value_cell_template),
    "badge-cell": Template(badge_cell_template),
    "placeholder-row": Template(placeholder_row_template),
    "error-section": Template(error_section_template),
    "notice-section": Template(notice_section_template),
}
