"""管理面板与首页的 HTML 渲染

所有用户数据输出前都经过 html.escape。
"""

from html import escape
from urllib.parse import urlencode

from backend.app.core.utils import format_ms
from backend.app.models.history import HistoryAction, HistoryEntry
from backend.app.models.token import ApiToken, PanelSettings
from backend.app.models.variable import DEFAULT_GROUP_ID, Group, Variable

_BOOTSTRAP = "https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css"

_ACTION_LABELS = {
    HistoryAction.CREATE: "新增",
    HistoryAction.UPDATE: "修改",
    HistoryAction.DELETE: "删除",
}


def _e(value: object) -> str:
    return escape("" if value is None else str(value), quote=True)


def _layout(title: str, body: str, nav: bool = True) -> str:
    menu = ""
    if nav:
        menu = """
        <nav class="mb-4">
            <a href="/admin" class="me-3">变量</a>
            <a href="/admin/groups" class="me-3">分组</a>
            <a href="/admin/history" class="me-3">历史</a>
            <a href="/admin/tokens" class="me-3">Token</a>
            <a href="/admin/settings" class="me-3">设置</a>
            <a href="/admin/logout" class="float-end">退出登录</a>
        </nav>"""
    return f"""<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>ValueAPI - {_e(title)}</title>
<link href="{_BOOTSTRAP}" rel="stylesheet">
<style>body{{background:#f7f7f7;}} .panel{{background:#fff;padding:24px;border-radius:8px;box-shadow:0 2px 8px #0001;max-width:960px;margin:40px auto;}}</style>
</head><body>
<div class="panel">{menu}
<h3 class="mb-4">{_e(title)}</h3>
{body}
</div>
</body></html>"""


def _pager(base: str, params: dict, page: int, total_pages: int) -> str:
    if total_pages <= 1:
        return ""
    links = []
    for number in range(1, total_pages + 1):
        query = urlencode({**{k: v for k, v in params.items() if v}, "page": number})
        active = " active" if number == page else ""
        links.append(
            f'<li class="page-item{active}"><a class="page-link" href="{base}?{_e(query)}">{number}</a></li>'
        )
    return f'<ul class="pagination pagination-sm">{"".join(links)}</ul>'


def _group_options(groups: list[Group], selected: str | None) -> str:
    return "".join(
        f'<option value="{_e(g.id)}"{" selected" if g.id == selected else ""}>{_e(g.name)}</option>'
        for g in groups
    )


def login_page(captcha_image: str | None = None, error: str | None = None) -> str:
    alert = f'<div class="alert alert-danger py-2">{_e(error)}</div>' if error else ""
    captcha = ""
    if captcha_image:
        captcha = f"""
            <div class="mb-3 d-flex align-items-center">
                <input name="captcha_value" class="form-control me-2" placeholder="验证码" required />
                <a href="/admin/login"><img src="{_e(captcha_image)}" alt="验证码" height="40" /></a>
            </div>"""
    body = f"""{alert}
        <form method="POST" action="/admin/login" style="max-width:340px">
            <div class="mb-3"><input type="password" class="form-control" name="password" placeholder="密码" required /></div>{captcha}
            <button type="submit" class="btn btn-primary w-100">登录</button>
        </form>"""
    return _layout("管理面板登录", body, nav=False)


def message_page(message: str, back_url: str = "/admin") -> str:
    body = f"""<div class="alert alert-warning">{_e(message)}</div>
        <a href="{_e(back_url)}" class="btn btn-secondary">返回</a>"""
    return _layout("操作失败", body)


def variables_page(
    variables: list[Variable],
    groups: list[Group],
    current_group: str | None,
    page: int,
    total_pages: int,
) -> str:
    group_names = {g.id: g.name for g in groups}
    rows = "".join(
        f"""
        <tr>
            <td><a href="/admin/history?{_e(urlencode({"name": v.name}))}">{_e(v.name)}</a></td>
            <td>
                <form method="POST" action="/admin/edit" class="d-inline-flex align-items-center">
                    <input type="hidden" name="name" value="{_e(v.name)}" />
                    <input name="value" value="{_e(v.value)}" class="form-control form-control-sm me-2" style="width:160px;" />
                    <button type="submit" class="btn btn-sm btn-outline-primary">修改</button>
                </form>
            </td>
            <td>
                <form method="POST" action="/admin/move" class="d-inline-flex align-items-center">
                    <input type="hidden" name="name" value="{_e(v.name)}" />
                    <select name="group_id" class="form-select form-select-sm me-2" style="width:130px;" title="{_e(group_names.get(v.group_id, ""))}">{_group_options(groups, v.group_id)}</select>
                    <button type="submit" class="btn btn-sm btn-outline-secondary">移动</button>
                </form>
            </td>
            <td>
                <form method="POST" action="/admin/delete" class="d-inline">
                    <input type="hidden" name="name" value="{_e(v.name)}" />
                    <button type="submit" class="btn btn-sm btn-outline-danger" onclick="return confirm('确定删除？')">删除</button>
                </form>
            </td>
        </tr>"""
        for v in variables
    )
    filter_options = '<option value="">全部分组</option>' + _group_options(groups, current_group)
    body = f"""
        <form method="GET" action="/admin" class="row g-2 mb-3">
            <div class="col-auto"><select name="group" class="form-select form-select-sm">{filter_options}</select></div>
            <div class="col-auto"><button type="submit" class="btn btn-sm btn-outline-secondary">筛选</button></div>
        </form>
        <table class="table table-bordered align-middle">
            <thead class="table-light"><tr><th>变量名</th><th>值</th><th>分组</th><th>操作</th></tr></thead>
            <tbody>{rows}</tbody>
        </table>
        {_pager("/admin", {"group": current_group}, page, total_pages)}
        <h5 class="mt-4">添加变量</h5>
        <form method="POST" action="/admin/add" class="row g-2 mb-3">
            <div class="col-auto"><input name="name" class="form-control" placeholder="变量名" required /></div>
            <div class="col-auto"><input name="value" class="form-control" placeholder="值" required /></div>
            <div class="col-auto"><select name="group_id" class="form-select">{_group_options(groups, current_group or DEFAULT_GROUP_ID)}</select></div>
            <div class="col-auto"><button type="submit" class="btn btn-success">添加</button></div>
        </form>"""
    return _layout("变量管理", body)


def history_page(
    entries: list[HistoryEntry],
    name: str | None,
    page: int,
    total_pages: int,
) -> str:
    rows = "".join(
        f"""
        <tr>
            <td>{_e(format_ms(h.timestamp))}</td>
            <td>{_e(h.name)}</td>
            <td>{_ACTION_LABELS[h.action]}</td>
            <td>{_e(h.old_value) if h.old_value is not None else '<span class="text-muted">-</span>'}</td>
            <td>{_e(h.new_value) if h.new_value is not None else '<span class="text-muted">-</span>'}</td>
            <td>{_e(h.source_address)}</td>
        </tr>"""
        for h in entries
    )
    title = f"变量历史：{name}" if name else "变更历史"
    body = f"""
        <table class="table table-sm table-bordered align-middle">
            <thead class="table-light"><tr><th>时间</th><th>变量名</th><th>操作</th><th>原值</th><th>新值</th><th>IP</th></tr></thead>
            <tbody>{rows}</tbody>
        </table>
        {_pager("/admin/history", {"name": name}, page, total_pages)}"""
    return _layout(title, body)


def groups_page(groups: list[Group], member_counts: dict[str, int]) -> str:
    rows = []
    for g in groups:
        if g.id == DEFAULT_GROUP_ID:
            actions = '<span class="text-muted">默认分组不可修改</span>'
        else:
            actions = f"""
                <form method="POST" action="/admin/groups/rename" class="d-inline-flex align-items-center me-2">
                    <input type="hidden" name="id" value="{_e(g.id)}" />
                    <input name="name" value="{_e(g.name)}" class="form-control form-control-sm me-2" style="width:140px;" required />
                    <button type="submit" class="btn btn-sm btn-outline-primary">重命名</button>
                </form>
                <form method="POST" action="/admin/groups/delete" class="d-inline">
                    <input type="hidden" name="id" value="{_e(g.id)}" />
                    <button type="submit" class="btn btn-sm btn-outline-danger" onclick="return confirm('删除后组内变量将移回默认分组，确定删除？')">删除</button>
                </form>"""
        rows.append(
            f"""
        <tr>
            <td><a href="/admin?{_e(urlencode({"group": g.id}))}">{_e(g.name)}</a></td>
            <td><code>{_e(g.id)}</code></td>
            <td>{member_counts.get(g.id, 0)}</td>
            <td>{actions}</td>
        </tr>"""
        )
    body = f"""
        <table class="table table-bordered align-middle">
            <thead class="table-light"><tr><th>名称</th><th>ID</th><th>变量数</th><th>操作</th></tr></thead>
            <tbody>{"".join(rows)}</tbody>
        </table>
        <h5 class="mt-4">添加分组</h5>
        <form method="POST" action="/admin/groups/add" class="row g-2 mb-3">
            <div class="col-auto"><input name="name" class="form-control" placeholder="分组名称" required /></div>
            <div class="col-auto"><button type="submit" class="btn btn-success">添加</button></div>
        </form>"""
    return _layout("分组管理", body)


def tokens_page(tokens: list[ApiToken], allow_new_token: bool) -> str:
    rows = []
    for t in tokens:
        delete = (
            '<span class="text-muted">不可删除</span>'
            if t.is_default
            else f"""
                <form method="POST" action="/admin/tokens/delete" class="d-inline">
                    <input type="hidden" name="name" value="{_e(t.name)}" />
                    <button type="submit" class="btn btn-sm btn-outline-danger" onclick="return confirm('确定删除？')">删除</button>
                </form>"""
        )
        rows.append(
            f"""
        <tr>
            <td>{_e(t.name)}</td>
            <td colspan="2">
                <form method="POST" action="/admin/tokens/edit" class="d-inline-flex align-items-center">
                    <input type="hidden" name="name" value="{_e(t.name)}" />
                    <input name="token" value="{_e(t.token)}" class="form-control form-control-sm me-2" style="width:280px;" />
                    <input name="remark" value="{_e(t.remark)}" class="form-control form-control-sm me-2" style="width:140px;" placeholder="备注" />
                    <button type="submit" class="btn btn-sm btn-outline-primary">保存</button>
                </form>
            </td>
            <td>{_e(format_ms(t.created_at)) if t.created_at else "-"}</td>
            <td>{delete}</td>
        </tr>"""
        )
    if allow_new_token:
        add_form = """
        <h5 class="mt-4">新建 Token</h5>
        <form method="POST" action="/admin/tokens/add" class="row g-2 mb-3">
            <div class="col-auto"><input name="name" class="form-control" placeholder="名称" required /></div>
            <div class="col-auto"><input name="remark" class="form-control" placeholder="备注" /></div>
            <div class="col-auto"><button type="submit" class="btn btn-success">生成</button></div>
        </form>"""
    else:
        add_form = '<p class="text-muted mt-4">当前设置不允许新建 Token</p>'
    body = f"""
        <table class="table table-bordered align-middle">
            <thead class="table-light"><tr><th>名称</th><th colspan="2">Token / 备注</th><th>创建时间</th><th>操作</th></tr></thead>
            <tbody>{"".join(rows)}</tbody>
        </table>
        {add_form}"""
    return _layout("Token 管理", body)


def settings_page(panel: PanelSettings) -> str:
    checked = " checked" if panel.allow_new_token else ""
    body = f"""
        <form method="POST" action="/admin/settings" style="max-width:420px">
            <div class="mb-3">
                <label class="form-label">历史记录上限</label>
                <input type="number" min="1" name="history_limit" value="{panel.history_limit}" class="form-control" required />
            </div>
            <div class="mb-3">
                <label class="form-label">每页显示数量</label>
                <input type="number" min="1" name="page_size" value="{panel.page_size}" class="form-control" required />
            </div>
            <div class="form-check mb-3">
                <input type="checkbox" class="form-check-input" id="allow_new_token" name="allow_new_token" value="true"{checked} />
                <label class="form-check-label" for="allow_new_token">允许新建 Token</label>
            </div>
            <button type="submit" class="btn btn-primary">保存</button>
        </form>"""
    return _layout("面板设置", body)


def index_page(port: int) -> str:
    body = f"""
        <p class="text-muted">一个轻量级的变量存储与管理接口，支持通过 API 查询和修改变量，并通过管理后台进行可视化修改</p>
        <hr>
        <h5>接口说明</h5>
        <ul>
            <li><b>查询变量：</b> <code>GET /get?name=变量名&amp;token=你的Token</code></li>
            <li><b>设置变量：</b> <code>POST /set?name=变量名&amp;value=新值&amp;token=你的Token</code></li>
            <li><b>REST 接口：</b> <code>/api/v1/variables</code>、<code>/api/v1/groups</code>（Token 可放在 Authorization: Bearer 中）</li>
            <li><b>管理后台：</b> <a href="/admin">/admin</a></li>
        </ul>
        <h6 class="mt-4">示例</h6>
        <pre class="bg-light p-2 rounded"><code>curl "http://你的IP:{port}/get?name=foo&amp;token=你的Token"</code></pre>
        <pre class="bg-light p-2 rounded"><code>curl -X POST "http://你的IP:{port}/set?name=foo&amp;value=bar&amp;token=你的Token"</code></pre>"""
    return _layout("ValueAPI", body, nav=False)
